import requests

from dashboard.api_session import REQUEST_TIMEOUT, ApiSession


class RecordingSession(requests.Session):
    def __init__(self):
        super().__init__()
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs, dict(self.headers)))
        response = requests.Response()
        response.status_code = 200
        response._content = b'{"access_token": "abc", "token_type": "bearer"}'
        return response


def test_paths_are_joined_to_base_url_with_timeout():
    recorder = RecordingSession()
    api = ApiSession(base_url="http://hub.local/", session=recorder)

    api.get("/api/attendance/today")

    method, url, kwargs, _ = recorder.calls[0]
    assert method == "GET"
    assert url == "http://hub.local/api/attendance/today"
    assert kwargs["timeout"] == REQUEST_TIMEOUT


def test_login_sets_bearer_token():
    recorder = RecordingSession()
    api = ApiSession(base_url="http://hub.local", session=recorder)

    api.login("mod@company.com", "Pwd#12345")
    api.patch("/api/schedules/1", json={"team": "NY"})

    assert recorder.calls[0][2]["json"] == {"email": "mod@company.com", "password": "Pwd#12345"}
    assert recorder.calls[1][3]["Authorization"] == "Bearer abc"

    api.set_token(None)
    assert "Authorization" not in recorder.headers

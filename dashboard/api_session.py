import os
from typing import Optional

import requests
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
REQUEST_TIMEOUT = 10


class ApiSession:
    """
    requests.Session bound to the API base URL and the caller's bearer token.

    Exposes the same get/post/patch surface as FastAPI's TestClient, so the
    dashboard view-models accept either one.
    """

    def __init__(self, base_url: str = API_BASE_URL, token: Optional[str] = None, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.http = session or requests.Session()
        if token:
            self.set_token(token)

    def set_token(self, token: Optional[str]):
        if token:
            self.http.headers["Authorization"] = f"Bearer {token}"
        else:
            self.http.headers.pop("Authorization", None)

    def login(self, email: str, password: str) -> dict:
        r = self.post("/api/auth/login", json={"email": email, "password": password})
        r.raise_for_status()
        data = r.json()
        self.set_token(data["access_token"])
        return data

    def get(self, path: str, **kwargs):
        return self.http.get(self.base_url + path, timeout=REQUEST_TIMEOUT, **kwargs)

    def post(self, path: str, **kwargs):
        return self.http.post(self.base_url + path, timeout=REQUEST_TIMEOUT, **kwargs)

    def patch(self, path: str, **kwargs):
        return self.http.patch(self.base_url + path, timeout=REQUEST_TIMEOUT, **kwargs)

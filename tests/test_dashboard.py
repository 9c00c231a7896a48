from datetime import date

import pytest
from fastapi.testclient import TestClient

from dashboard.moderator import HISTORY_KEY, STATS_KEY, TODAY_KEY, ModeratorDashboard
from dashboard.queries import EMPTY, ERROR, LOADING, SUCCESS, QueryClient
from dashboard.schedule import ScheduleView, day_slots, shift_badge_variant
from main import app


@pytest.fixture
def dashboard(moderator_headers):
    return ModeratorDashboard(QueryClient(TestClient(app, headers=moderator_headers)))


def test_open_tracks_login_and_loads_panels(dashboard):
    assert dashboard.client.peek(TODAY_KEY).status == LOADING

    dashboard.open()

    assert dashboard.client.peek(TODAY_KEY).status == EMPTY
    assert dashboard.client.peek(STATS_KEY).status == SUCCESS
    assert len(dashboard.stats().data["recent_activity"]) == 1
    assert dashboard.can_mark_attendance() is True


def test_mark_attendance_refreshes_card_and_disables_button(dashboard):
    dashboard.open()

    result = dashboard.mark_attendance(location="Office")
    assert result.ok
    assert dashboard.client.visible_toasts[-1].description == "Attendance marked successfully"

    assert dashboard.today_attendance().status == SUCCESS
    assert dashboard.can_mark_attendance() is False
    assert dashboard.stats().data["present_days"] == 1
    assert len(dashboard.history().data) == 1

    again = dashboard.mark_attendance()
    assert not again.ok
    assert again.status_code == 409
    toast = dashboard.client.visible_toasts[-1]
    assert toast.variant == "destructive"
    assert toast.description == "Attendance already marked for today"


def test_weekly_calendar_marks_attended_day(dashboard):
    dashboard.mark_attendance()
    marked_on = date.fromisoformat(dashboard.history().data[0]["attendance_day"])

    calendar = dashboard.weekly_calendar(marked_on)
    assert [d["day"] for d in calendar] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [d["is_weekend"] for d in calendar] == [False] * 5 + [True] * 2
    today = [d for d in calendar if d["is_today"]]
    assert len(today) == 1
    assert today[0]["has_attendance"] is True
    assert sum(d["has_attendance"] for d in calendar) == 1


def test_review_form_requires_fields_before_sending(dashboard):
    result = dashboard.submit_review({"customer_name": "Alice", "review_text": ""})
    assert not result.ok
    assert result.status_code is None
    assert set(result.field_errors) == {"customer_email", "review_text"}
    assert dashboard.client.visible_toasts[-1].description == "Please fill in all required fields"
    assert dashboard.reviews().status == EMPTY


def test_review_submit_resets_form_and_refreshes_list(dashboard):
    dashboard.reviews()
    dashboard.attach_screenshot("data:image/png;base64,AAAA")
    result = dashboard.submit_review({
        "customer_name": "Alice",
        "customer_email": "alice@mail.com",
        "rating": 4,
        "review_text": "Helpful",
    })
    assert result.ok, result.message
    assert dashboard.review_form["customer_name"] == ""

    reviews = dashboard.reviews()
    assert reviews.status == SUCCESS
    assert reviews.data[0]["status"] == "pending"
    assert reviews.data[0]["screenshot_url"] == "data:image/png;base64,AAAA"


def test_server_validation_errors_reach_the_form(dashboard):
    result = dashboard.submit_review({
        "customer_name": "Alice",
        "customer_email": "not-an-email",
        "review_text": "Helpful",
    })
    assert not result.ok
    assert result.status_code == 422
    assert "customer_email" in dashboard.review_errors


def test_logout_clears_cache(dashboard):
    dashboard.open()
    result = dashboard.logout()
    assert result.ok
    assert dashboard.logged_out is True
    assert dashboard.client.peek(TODAY_KEY).status == LOADING

    # The revoked token no longer reads anything
    assert dashboard.today_attendance().status == ERROR


def test_unknown_path_reads_as_empty(moderator_headers):
    client = QueryClient(TestClient(app, headers=moderator_headers))
    assert client.query("/api/does-not-exist").status == EMPTY


def test_query_is_cached_until_invalidated(dashboard):
    first = dashboard.history()
    assert dashboard.history() is first
    dashboard.client.invalidate(HISTORY_KEY)
    assert dashboard.history() is not first


def test_schedule_view(client, admin_headers, moderator_headers):
    mod_id = client.get("/api/auth/user", headers=moderator_headers).json()["id"]
    client.post("/api/schedules", json={
        "user_id": mod_id,
        "agent_name": "Mod",
        "team": "London",
        "monday": "Morning",
        "friday": "17:00-01:00",
    }, headers=admin_headers)
    client.post("/api/schedules", json={"user_id": mod_id, "agent_name": "Other", "team": "Asia"}, headers=admin_headers)

    moderator_view = ScheduleView(QueryClient(TestClient(app, headers=moderator_headers)), role="moderator")
    assert moderator_view.teams() == ["Asia", "London"]
    mine = moderator_view.my_schedule()
    assert mine.status == SUCCESS
    assert mine.data["agent_name"] == "Other"

    admin_view = ScheduleView(QueryClient(TestClient(app, headers=admin_headers)), role="admin")
    assert admin_view.my_schedule() is None

    slots = day_slots(moderator_view.schedules().data[0])
    assert slots[0] == ("Monday", "Morning")
    assert slots[2] == ("Wednesday", "Off")


@pytest.mark.parametrize("slot,variant", [
    ("Off", "secondary"),
    (None, "secondary"),
    ("Morning", "default"),
    ("9:00-17:00", "default"),
    ("Evening", "destructive"),
    ("17:00-01:00", "destructive"),
    ("Night", "outline"),
])
def test_shift_badge_variant(slot, variant):
    assert shift_badge_variant(slot) == variant

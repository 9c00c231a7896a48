"""
Moderator dashboard view-model: attendance card, monthly stats, weekly
calendar, recent activity and the Trustpilot review form.
"""

from datetime import date
from typing import List, Optional

from dashboard.queries import EMPTY, MutationResult, QueryClient, QueryState
from services.timezone_utils import local_today, week_days

TODAY_KEY = "/api/attendance/today"
STATS_KEY = "/api/user/stats"
HISTORY_KEY = "/api/attendance/history/7"
REVIEWS_KEY = "/api/trustpilot/reviews"

DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
REQUIRED_REVIEW_FIELDS = ("customer_name", "customer_email", "review_text")


def empty_review_form() -> dict:
    return {
        "customer_name": "",
        "customer_email": "",
        "rating": 5,
        "review_text": "",
        "business_response": "",
        "screenshot_url": "",
    }


class ModeratorDashboard:
    def __init__(self, client: QueryClient):
        self.client = client
        self.review_form = empty_review_form()
        self.review_errors = {}
        self.logged_out = False

    def open(self):
        """Record the login, then load every panel."""
        self.track_login()
        for key in (TODAY_KEY, STATS_KEY, HISTORY_KEY, REVIEWS_KEY):
            self.client.query(key)

    # Panels -------------------------------------------------------------

    def today_attendance(self) -> QueryState:
        return self.client.query(TODAY_KEY)

    def stats(self) -> QueryState:
        return self.client.query(STATS_KEY)

    def history(self) -> QueryState:
        return self.client.query(HISTORY_KEY)

    def reviews(self) -> QueryState:
        return self.client.query(REVIEWS_KEY)

    def can_mark_attendance(self) -> bool:
        # The button stays disabled until the server confirms no mark exists today
        return self.client.peek(TODAY_KEY).status == EMPTY

    def weekly_calendar(self, today: Optional[date] = None) -> List[dict]:
        today = today or local_today()
        history = self.history().data or []
        marked_days = {row["attendance_day"] for row in history}
        return [
            {
                "day": DAY_NAMES[index],
                "date": day.day,
                "is_weekend": index >= 5,
                "is_today": day == today,
                "has_attendance": day.isoformat() in marked_days,
            }
            for index, day in enumerate(week_days(today))
        ]

    # Actions ------------------------------------------------------------

    def track_login(self, location: Optional[str] = None) -> MutationResult:
        # Failures here are not shown to the user
        body = {"location": location} if location else None
        return self.client.mutate("POST", "/api/auth/track-login", json=body, notify_errors=False)

    def mark_attendance(self, location: Optional[str] = None) -> MutationResult:
        body = {"location": location} if location else None
        return self.client.mutate(
            "POST",
            "/api/attendance/mark",
            json=body,
            invalidates=(TODAY_KEY, STATS_KEY, HISTORY_KEY),
            success_message="Attendance marked successfully",
            error_message="Failed to mark attendance",
        )

    def submit_review(self, form: Optional[dict] = None) -> MutationResult:
        if form is not None:
            self.review_form.update(form)

        missing = [f for f in REQUIRED_REVIEW_FIELDS if not str(self.review_form.get(f) or "").strip()]
        if missing:
            self.client.notify("Error", "Please fill in all required fields", variant="destructive")
            self.review_errors = {f: "Required" for f in missing}
            return MutationResult(ok=False, message="Please fill in all required fields", field_errors=dict(self.review_errors))

        # Optional fields are sent only when filled in
        body = {k: v for k, v in self.review_form.items() if v not in ("", None)}
        result = self.client.mutate(
            "POST",
            "/api/trustpilot/reviews",
            json=body,
            invalidates=(REVIEWS_KEY,),
            success_message="Trustpilot review submitted successfully",
            error_message="Failed to submit review",
        )
        if result.ok:
            self.review_form = empty_review_form()
            self.review_errors = {}
        else:
            self.review_errors = result.field_errors
        return result

    def attach_screenshot(self, data_url: str):
        # The file is encoded client-side and travels as an opaque string
        self.review_form["screenshot_url"] = data_url

    def logout(self) -> MutationResult:
        result = self.client.mutate(
            "POST",
            "/api/auth/logout",
            error_title="Logout failed",
            error_message="Failed to logout",
        )
        if result.ok:
            self.client.clear()
            self.logged_out = True
        return result

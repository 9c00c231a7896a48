from typing import List, Optional, Tuple

from dashboard.queries import QueryClient, QueryState

SCHEDULES_KEY = "/api/schedules"
MY_SCHEDULE_KEY = "/api/schedules/my-schedule"

DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
DAY_LABELS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def day_slots(schedule: dict) -> List[Tuple[str, str]]:
    return [(label, schedule.get(day) or "Off") for day, label in zip(DAYS, DAY_LABELS)]


def shift_badge_variant(slot: Optional[str]) -> str:
    if not slot or slot == "Off":
        return "secondary"
    if "Morning" in slot or "9:00" in slot:
        return "default"
    if "Evening" in slot or "17:00" in slot:
        return "destructive"
    return "outline"


class ScheduleView:
    def __init__(self, client: QueryClient, role: str):
        self.client = client
        self.role = role

    def schedules(self) -> QueryState:
        return self.client.query(SCHEDULES_KEY)

    def my_schedule(self) -> Optional[QueryState]:
        # Admins have no personal schedule panel
        if self.role == "admin":
            return None
        return self.client.query(MY_SCHEDULE_KEY)

    def teams(self) -> List[str]:
        rows = self.schedules().data or []
        return sorted({row["team"] for row in rows})

"""
Calendar-date helpers shared by the task overview, the activity overview and
the productivity stats, so that "today" means the same thing everywhere.

Only the date portion of a value is ever compared: time of day and UTC
offsets are ignored, and ISO-8601 date strings order lexicographically.
"""
from datetime import date, datetime, timezone
from typing import Dict, Iterable, List, Optional, Union

DateLike = Union[str, date, datetime]

OVERDUE = "overdue"
TODAY = "today"
UPCOMING = "upcoming"


def today_key(now: Optional[datetime] = None) -> str:
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.date().isoformat()


def date_key(value: DateLike) -> str:
    if isinstance(value, datetime):
        # Keep the wall-clock date the upstream reported, offset ignored
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value.split("T")[0]


def due_bucket(due_date: Optional[DateLike], today: str) -> Optional[str]:
    if not due_date:
        return None
    day = date_key(due_date)
    if day < today:
        return OVERDUE
    if day == today:
        return TODAY
    return UPCOMING


def is_on_day(value: DateLike, day: str) -> bool:
    return date_key(value) == day


def count_by_day(values: Iterable[DateLike]) -> List[Dict[str, object]]:
    counts: Dict[str, int] = {}
    for value in values:
        day = date_key(value)
        counts[day] = counts.get(day, 0) + 1
    return [{"date": day, "count": counts[day]} for day in sorted(counts)]

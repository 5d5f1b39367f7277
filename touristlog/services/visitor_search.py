# touristlog/services/visitor_search.py
"""
In-memory filters over visitor rows.

The admin table and the API fetch every row and narrow them down here, so
the matching rules live in one place:

  * name, control number and email: case-insensitive substring
  * phone: substring after dropping spaces, ( ) - and + from both sides
  * day: created_at within [00:00:00.000, 23:59:59.999...] local time
"""
import re
from datetime import date, datetime, time
from typing import Iterable

_PHONE_NOISE = re.compile(r"[\s\-()+]")


def normalize_phone(value: str | None) -> str:
    return _PHONE_NOISE.sub("", value or "")


def matches_query(visitor, query: str | None) -> bool:
    q = (query or "").strip()
    if not q:
        return True
    needle = q.lower()

    for text in (visitor.name, visitor.control_number, visitor.email):
        if text and needle in text.lower():
            return True

    digits = normalize_phone(q)
    return bool(digits) and digits in normalize_phone(visitor.phone)


def search(visitors: Iterable, query: str | None) -> list:
    return [v for v in visitors if matches_query(v, query)]


def parse_day(value: str | date | None) -> date | None:
    """'2025-03-14' -> date(2025, 3, 14). Blank -> None. Bad input raises ValueError."""
    if value is None or isinstance(value, date):
        return value
    value = value.strip()
    if not value:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValueError(f"Invalid date {value!r}; expected YYYY-MM-DD") from None


def day_bounds(day: date) -> tuple[datetime, datetime]:
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def on_day(visitors: Iterable, day: date) -> list:
    start, end = day_bounds(day)
    return [v for v in visitors if v.created_at and start <= v.created_at <= end]

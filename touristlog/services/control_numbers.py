# touristlog/services/control_numbers.py
from datetime import datetime, timedelta

from sqlalchemy import extract, func

from touristlog.models.visitor import ControlCounter, Visitor

PREFIX = "#TL"
STRATEGIES = ("counter", "timestamp")


def format_control_number(year: int, sequence: int) -> str:
    return f"{PREFIX}-{year:04d}-{sequence:03d}"


def timestamp_control_number(now: datetime, offset_ms: int = 0) -> str:
    """`offset_ms` moves the reading forward so a retried insert gets a new number."""
    millis = int((now + timedelta(milliseconds=offset_ms)).timestamp() * 1000)
    return f"{PREFIX}-{now.year:04d}-{str(millis)[-6:]}"


def _highest_issued(session, year: int) -> int:
    prefix = f"{PREFIX}-{year:04d}-"
    highest = 0
    for (number,) in session.query(Visitor.control_number).filter(Visitor.control_number.like(prefix + "%")):
        suffix = number[len(prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest


def next_sequence(session, year: int) -> int:
    """
    Bump and return the counter for `year`. Runs inside the caller's
    transaction, so the bump is rolled back together with a failed insert.
    """
    counter = session.get(ControlCounter, year, with_for_update=True)
    if counter is None:
        # first registration of the year (or a database that predates the counter table);
        # deleted rows leave gaps, so start after the highest number already out there
        existing = session.query(func.count(Visitor.id)).filter(
            extract("year", Visitor.created_at) == year
        ).scalar() or 0
        counter = ControlCounter(year=year, last_sequence=max(existing, _highest_issued(session, year)))
        session.add(counter)

    counter.last_sequence = (counter.last_sequence or 0) + 1
    session.flush()
    return counter.last_sequence


def issue_control_number(session, strategy: str, now: datetime, attempt: int = 0) -> str:
    strategy = (strategy or "counter").strip().lower()
    if strategy == "timestamp":
        return timestamp_control_number(now, offset_ms=attempt)
    if strategy != "counter":
        raise ValueError(f"Unknown control number strategy: {strategy!r}")
    return format_control_number(now.year, next_sequence(session, now.year))

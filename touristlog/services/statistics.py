# touristlog/services/statistics.py
import math
from datetime import datetime, timedelta
from typing import Iterable


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def compute_statistics(visitors: Iterable, now: datetime | None = None) -> dict:
    """
    todayVisitors  - created on today's local calendar date
    weekVisitors   - created at or after now - 7 days
    totalVisitors  - everything
    avgDaily       - total / days since the oldest record (at least 1), rounded
    """
    now = now or datetime.now()
    stamps = [v.created_at for v in visitors if v.created_at is not None]

    today = now.date()
    week_start = now - timedelta(days=7)
    total = len(stamps)

    avg_daily = 0
    if stamps:
        span = (now - min(stamps)).total_seconds() / 86400
        days = max(1, math.ceil(span))
        avg_daily = _round_half_up(total / days)

    return {
        "todayVisitors": sum(1 for ts in stamps if ts.date() == today),
        "weekVisitors": sum(1 for ts in stamps if ts >= week_start),
        "totalVisitors": total,
        "avgDaily": avg_daily,
    }


def distinct_days(visitors: Iterable) -> int:
    return len({v.created_at.date() for v in visitors if v.created_at is not None})

# touristlog/utils/db.py
import time
from typing import Callable, TypeVar

from flask import current_app
from sqlalchemy.exc import IntegrityError, OperationalError

T = TypeVar("T")


def _retryable(exc: Exception) -> bool:
    if isinstance(exc, IntegrityError):
        return True  # e.g. two registrations raced for the same control number
    return isinstance(exc, OperationalError) and "database is locked" in str(exc).lower()


def commit_with_retry(session, work: Callable[[], T], retries: int = 3, base_delay: float = 0.05) -> T:
    """
    Run `work()` and commit. On a unique-key clash or a locked SQLite file the
    session is rolled back and the whole unit of work is run again.
    """
    for i in range(retries):
        try:
            result = work()
            session.commit()
            return result
        except (IntegrityError, OperationalError) as e:
            session.rollback()
            if _retryable(e) and i < retries - 1:
                current_app.logger.warning("commit failed (%s), retry %d/%d", type(e).__name__, i + 1, retries)
                time.sleep(base_delay * (2 ** i))
                continue
            raise

# touristlog/services/visitor_store.py
from datetime import date, datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from touristlog.models.visitor import Visitor
from touristlog.services import visitor_search
from touristlog.services.control_numbers import STRATEGIES, issue_control_number
from touristlog.utils.db import commit_with_retry


class VisitorStore:
    """
    Visitor records on top of the Flask-SQLAlchemy session.

    Created once by the app factory (app.extensions["visitor_store"]); views
    get it through get_store(). Reads return newest first.
    """

    def __init__(self, db, strategy: str = "counter"):
        strategy = (strategy or "counter").strip().lower()
        if strategy not in STRATEGIES:
            raise ValueError(f"CONTROL_NUMBER_STRATEGY must be one of {STRATEGIES}, got {strategy!r}")
        self.db = db
        self.strategy = strategy

    @property
    def session(self):
        return self.db.session

    # -------- reads --------

    def all(self) -> list[Visitor]:
        return (
            self.session.query(Visitor)
            .order_by(Visitor.created_at.desc(), Visitor.control_number.desc())
            .all()
        )

    def get(self, visitor_id: str) -> Visitor | None:
        if not visitor_id:
            return None
        return self.session.get(Visitor, visitor_id)

    def by_date(self, day: date | str) -> list[Visitor]:
        day = visitor_search.parse_day(day)
        start, end = visitor_search.day_bounds(day)
        return (
            self.session.query(Visitor)
            .filter(Visitor.created_at >= start, Visitor.created_at <= end)
            .order_by(Visitor.created_at.desc())
            .all()
        )

    def search(self, query: str) -> list[Visitor]:
        return visitor_search.search(self.all(), query)

    def list(self, search: str | None = None, day: date | str | None = None) -> list[Visitor]:
        """Both filters apply when both are given; neither -> everything."""
        day = visitor_search.parse_day(day)
        rows = self.by_date(day) if day else self.all()
        if search and search.strip():
            rows = visitor_search.search(rows, search)
        return rows

    # -------- writes --------

    def create(self, data: dict, now: datetime | None = None) -> Visitor:
        now = now or datetime.now()
        attempts = []

        def _insert():
            number = issue_control_number(self.session, self.strategy, now, attempt=len(attempts))
            attempts.append(number)
            visitor = Visitor(
                control_number=number,
                name=data["name"].strip(),
                gender=data.get("gender") or None,
                phone=(data.get("phone") or "").strip() or None,
                email=(data.get("email") or "").strip() or None,
                purpose=data["purpose"],
                purpose_other=(data.get("purpose_other") or "").strip() or None,
                created_at=now,
            )
            self.session.add(visitor)
            self.session.flush()
            return visitor

        visitor = commit_with_retry(self.session, _insert)
        current_app.logger.info("visitor registered id=%s control=%s", visitor.id, visitor.control_number)
        return visitor

    def update(self, visitor_id: str, changes: dict) -> Visitor | None:
        visitor = self.get(visitor_id)
        if visitor is None:
            return None

        for field in Visitor.EDITABLE:
            if field not in changes:
                continue
            value = changes[field]
            if isinstance(value, str):
                value = value.strip()
            setattr(visitor, field, value or None)

        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        current_app.logger.info("visitor updated id=%s fields=%s", visitor.id, sorted(changes))
        return visitor

    def delete(self, visitor_id: str) -> bool:
        visitor = self.get(visitor_id)
        if visitor is None:
            return False
        try:
            self.session.delete(visitor)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        current_app.logger.info("visitor deleted id=%s control=%s", visitor_id, visitor.control_number)
        return True


def get_store() -> VisitorStore:
    return current_app.extensions["visitor_store"]

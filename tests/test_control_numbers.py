# tests/test_control_numbers.py
import re
from datetime import datetime, timedelta

import pytest

from touristlog.extensions import db
from touristlog.models import ControlCounter, Visitor
from touristlog.services.control_numbers import (
    format_control_number, issue_control_number, timestamp_control_number,
)
from touristlog.services.visitor_store import VisitorStore


def test_format_pads_to_three_digits():
    assert format_control_number(2025, 1) == "#TL-2025-001"
    assert format_control_number(2025, 42) == "#TL-2025-042"
    assert format_control_number(2025, 1234) == "#TL-2025-1234"


def test_timestamp_strategy_uses_last_six_digits_of_epoch_millis():
    now = datetime(2025, 5, 1, 10, 30, 0, 123000)
    millis = str(int(now.timestamp() * 1000))
    assert timestamp_control_number(now) == f"#TL-2025-{millis[-6:]}"


def test_counter_is_sequential_within_a_year(make_visitor):
    a = make_visitor("A", when=datetime(2025, 1, 2, 9, 0))
    b = make_visitor("B", when=datetime(2025, 1, 2, 9, 5))
    c = make_visitor("C", when=datetime(2025, 3, 9, 14, 0))
    assert [a.control_number, b.control_number, c.control_number] == [
        "#TL-2025-001", "#TL-2025-002", "#TL-2025-003",
    ]
    assert db.session.get(ControlCounter, 2025).last_sequence == 3


def test_counter_restarts_each_year(make_visitor):
    make_visitor("Old", when=datetime(2024, 12, 31, 23, 0))
    new = make_visitor("New", when=datetime(2025, 1, 1, 8, 0))
    assert new.control_number == "#TL-2025-001"


def test_counter_does_not_reuse_numbers_after_delete(make_visitor, store):
    first = make_visitor("A", when=datetime(2025, 2, 1, 9, 0))
    make_visitor("B", when=datetime(2025, 2, 1, 9, 1))
    store.delete(first.id)
    third = make_visitor("C", when=datetime(2025, 2, 1, 9, 2))
    assert third.control_number == "#TL-2025-003"


def test_counter_seeds_from_existing_rows(app):
    db.session.add(Visitor(control_number="#TL-2024-legacy", name="Legacy",
                           phone="123 4567", purpose="business",
                           created_at=datetime(2024, 6, 1, 12, 0)))
    db.session.commit()

    assert issue_control_number(db.session, "counter", datetime(2024, 6, 2, 9, 0)) == "#TL-2024-002"


def test_counter_seeds_past_gaps_left_by_deletes(app):
    for seq in (1, 2, 3):
        db.session.add(Visitor(control_number=format_control_number(2024, seq), name=f"Guest {seq}",
                               phone="123 4567", purpose="business",
                               created_at=datetime(2024, 6, 1, 9, seq)))
    db.session.commit()
    store = VisitorStore(db, strategy="counter")
    store.delete(Visitor.query.filter_by(control_number="#TL-2024-001").one().id)

    v = store.create({"name": "Next", "phone": "1234567", "purpose": "ocular"},
                     now=datetime(2024, 6, 2, 9, 0))
    assert v.control_number == "#TL-2024-004"
    assert db.session.get(ControlCounter, 2024).last_sequence == 4


def test_timestamp_collision_is_retried_with_a_new_number(app):
    store = VisitorStore(db, strategy="timestamp")
    first_at = datetime(2025, 5, 1, 10, 30, 0, 123000)
    later = first_at + timedelta(seconds=1000)  # same last six digits of epoch ms
    assert timestamp_control_number(later) == timestamp_control_number(first_at)

    first = store.create({"name": "Ana", "phone": "1234567", "purpose": "ocular"}, now=first_at)
    second = store.create({"name": "Ben", "phone": "7654321", "purpose": "event"}, now=later)

    assert second.control_number != first.control_number
    assert second.control_number == timestamp_control_number(later, offset_ms=1)
    assert second.created_at == later
    assert Visitor.query.count() == 2


def test_timestamp_strategy_store(app):
    store = VisitorStore(db, strategy="timestamp")
    v = store.create({"name": "Ana", "phone": "1234567", "purpose": "ocular"})
    assert re.fullmatch(r"#TL-\d{4}-\d{6}", v.control_number)


def test_unknown_strategy_is_rejected(app):
    with pytest.raises(ValueError):
        VisitorStore(db, strategy="random")
    with pytest.raises(ValueError):
        issue_control_number(db.session, "random", datetime.now())

# tests/test_visitor_search.py
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from touristlog.services import visitor_search


def _v(name="Ana Cruz", control="#TL-2025-001", email="ana@example.com", phone="+63 (912) 345-6789", created=None):
    return SimpleNamespace(name=name, control_number=control, email=email, phone=phone,
                           created_at=created or datetime(2025, 3, 14, 10, 0))


def test_name_match_is_case_insensitive():
    assert visitor_search.matches_query(_v(), "ANA")
    assert visitor_search.matches_query(_v(), "cruz")
    assert not visitor_search.matches_query(_v(), "maria")


def test_control_number_and_email_match():
    assert visitor_search.matches_query(_v(), "#tl-2025-001")
    assert visitor_search.matches_query(_v(), "EXAMPLE.COM")


def test_phone_ignores_spaces_and_punctuation_on_both_sides():
    v = _v()
    assert visitor_search.matches_query(v, "9123456789")
    assert visitor_search.matches_query(v, "+63 912-345")
    assert visitor_search.matches_query(v, "(912) 345 6789")
    assert not visitor_search.matches_query(v, "9999")


def test_punctuation_only_query_does_not_match_on_phone():
    assert not visitor_search.matches_query(_v(name="Bo", email=None), "+()")


def test_missing_fields_are_skipped():
    v = _v(email=None, phone=None)
    assert visitor_search.matches_query(v, "ana")
    assert not visitor_search.matches_query(v, "912")


def test_blank_query_matches_everything():
    rows = [_v(), _v(name="Ben")]
    assert visitor_search.search(rows, "   ") == rows
    assert visitor_search.search(rows, None) == rows


def test_parse_day():
    assert visitor_search.parse_day("2025-03-14") == date(2025, 3, 14)
    assert visitor_search.parse_day("") is None
    assert visitor_search.parse_day(None) is None
    with pytest.raises(ValueError):
        visitor_search.parse_day("14/03/2025")
    with pytest.raises(ValueError):
        visitor_search.parse_day("2025-03-14garbage")
    assert visitor_search.parse_day(" 2025-03-14 ") == date(2025, 3, 14)


def test_day_bounds_are_inclusive():
    day = date(2025, 3, 14)
    rows = [
        _v(name="start", created=datetime(2025, 3, 14, 0, 0, 0, 0)),
        _v(name="end", created=datetime(2025, 3, 14, 23, 59, 59, 999000)),
        _v(name="before", created=datetime(2025, 3, 13, 23, 59, 59, 999000)),
        _v(name="after", created=datetime(2025, 3, 15, 0, 0, 0, 0)),
    ]
    assert [v.name for v in visitor_search.on_day(rows, day)] == ["start", "end"]

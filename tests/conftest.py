# tests/conftest.py
from datetime import datetime

import pytest

from config import TestConfig
from touristlog import create_app
from touristlog.extensions import db
from touristlog.services.visitor_store import get_store


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["is_admin"] = True
    return client


@pytest.fixture
def store(app):
    return get_store()


@pytest.fixture
def make_visitor(store):
    def _make(name="Ana Cruz", when=None, **fields):
        data = {
            "name": name,
            "phone": "+63 912 345 6789",
            "email": None,
            "purpose": "ocular",
        }
        data.update(fields)
        return store.create(data, now=when or datetime.now())
    return _make

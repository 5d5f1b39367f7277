# tests/test_api.py
import re
from datetime import datetime


def _create(client, **overrides):
    body = {"name": "Ana Cruz", "phone": "+63 912 345 6789", "purpose": "ocular"}
    body.update(overrides)
    return client.post("/api/visitors", json=body)


def test_register_and_find_by_search(client):
    resp = _create(client)
    assert resp.status_code == 201
    visitor = resp.get_json()
    year = datetime.now().year
    assert re.fullmatch(rf"#TL-{year}-\d{{3}}", visitor["controlNumber"])
    assert visitor["id"]
    assert visitor["createdAt"]

    found = client.get("/api/visitors", query_string={"search": "Ana"}).get_json()
    assert [v["id"] for v in found] == [visitor["id"]]


def test_control_numbers_are_unique(client):
    numbers = {_create(client, name=f"Guest {i}").get_json()["controlNumber"] for i in range(5)}
    assert len(numbers) == 5


def test_validation_failure_returns_400_with_message(client):
    resp = client.post("/api/visitors", json={"phone": "+63 912 345 6789", "purpose": "ocular"})
    assert resp.status_code == 400
    assert "Name is required" in resp.get_json()["message"]


def test_phone_or_email_is_required(client):
    resp = client.post("/api/visitors", json={"name": "Ana", "purpose": "ocular"})
    assert resp.status_code == 400
    assert "Phone number or email is required" in resp.get_json()["message"]

    assert _create(client, phone=None, email="ana@example.com").status_code == 201


def test_invalid_email_and_gender_are_rejected(client):
    assert _create(client, email="not-an-email").status_code == 400
    assert _create(client, gender="robot").status_code == 400
    assert _create(client, gender="prefer_not_to_say").status_code == 201


def test_free_text_purpose_is_kept_as_other(client):
    visitor = _create(client, purpose="Bird watching").get_json()
    assert visitor["purpose"] == "other"
    assert visitor["purposeOther"] == "Bird watching"


def test_search_phone_ignores_formatting(client):
    _create(client)
    _create(client, name="Ben Reyes", phone="0917-000-1111")
    found = client.get("/api/visitors", query_string={"search": "(912) 345"}).get_json()
    assert [v["name"] for v in found] == ["Ana Cruz"]


def test_list_is_newest_first(client, make_visitor):
    make_visitor("Early", when=datetime(2025, 3, 1, 8, 0))
    make_visitor("Late", when=datetime(2025, 3, 2, 8, 0))
    names = [v["name"] for v in client.get("/api/visitors").get_json()]
    assert names == ["Late", "Early"]


def test_date_filter_boundaries(client, make_visitor):
    make_visitor("start", when=datetime(2025, 3, 14, 0, 0, 0, 0))
    make_visitor("end", when=datetime(2025, 3, 14, 23, 59, 59, 999000))
    make_visitor("before", when=datetime(2025, 3, 13, 23, 59, 59, 999000))
    make_visitor("after", when=datetime(2025, 3, 15, 0, 0, 0, 0))

    found = client.get("/api/visitors", query_string={"date": "2025-03-14"}).get_json()
    assert sorted(v["name"] for v in found) == ["end", "start"]


def test_search_and_date_combine(client, make_visitor):
    make_visitor("Ana Cruz", when=datetime(2025, 3, 14, 9, 0))
    make_visitor("Ana Santos", when=datetime(2025, 3, 15, 9, 0))
    make_visitor("Ben Cruz", when=datetime(2025, 3, 14, 10, 0))

    found = client.get("/api/visitors", query_string={"date": "2025-03-14", "search": "ana"}).get_json()
    assert [v["name"] for v in found] == ["Ana Cruz"]


def test_bad_date_is_400(client):
    resp = client.get("/api/visitors", query_string={"date": "yesterday"})
    assert resp.status_code == 400


def test_get_visitor(client):
    visitor = _create(client).get_json()
    assert client.get(f"/api/visitors/{visitor['id']}").get_json()["name"] == "Ana Cruz"

    resp = client.get("/api/visitors/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Visitor not found"


def test_partial_update_keeps_immutable_fields(client):
    visitor = _create(client).get_json()
    resp = client.put(
        f"/api/visitors/{visitor['id']}",
        json={"email": "ana@example.com", "controlNumber": "#TL-1999-999", "createdAt": "1999-01-01T00:00:00"},
    )
    assert resp.status_code == 200
    updated = resp.get_json()
    assert updated["email"] == "ana@example.com"
    assert updated["phone"] == visitor["phone"]
    assert updated["controlNumber"] == visitor["controlNumber"]
    assert updated["createdAt"] == visitor["createdAt"]


def test_update_cannot_remove_both_contacts(client):
    visitor = _create(client).get_json()
    resp = client.put(f"/api/visitors/{visitor['id']}", json={"phone": ""})
    assert resp.status_code == 400


def test_update_missing_visitor_is_404(client):
    assert client.put("/api/visitors/nope", json={"name": "X"}).status_code == 404


def test_delete(client):
    visitor = _create(client).get_json()
    resp = client.delete(f"/api/visitors/{visitor['id']}")
    assert resp.status_code == 200
    assert resp.get_json()["message"] == "Visitor deleted successfully"
    assert client.get("/api/visitors").get_json() == []

    again = client.delete(f"/api/visitors/{visitor['id']}")
    assert again.status_code == 404


def test_statistics(client, make_visitor):
    make_visitor("Today")
    make_visitor("Long ago", when=datetime(2020, 1, 1, 12, 0))
    stats = client.get("/api/statistics").get_json()
    assert stats["todayVisitors"] == 1
    assert stats["weekVisitors"] == 1
    assert stats["totalVisitors"] == 2
    assert stats["avgDaily"] == 0


def test_users(client):
    resp = client.post("/api/users", json={"username": "frontdesk", "password": "s3cret-pass"})
    assert resp.status_code == 201
    created = resp.get_json()
    assert created["username"] == "frontdesk"
    assert "password" not in created

    fetched = client.get("/api/users/frontdesk").get_json()
    assert fetched["id"] == created["id"]
    assert "password" not in fetched and "passwordHash" not in fetched

    dup = client.post("/api/users", json={"username": "frontdesk", "password": "another-pass"})
    assert dup.status_code == 400
    assert client.get("/api/users/nobody").status_code == 404


def test_user_password_is_hashed(app, client):
    from touristlog.models import User
    client.post("/api/users", json={"username": "desk", "password": "s3cret-pass"})
    user = User.query.filter_by(username="desk").one()
    assert user.password_hash != "s3cret-pass"
    assert user.check_password("s3cret-pass")


def test_user_validation(client):
    resp = client.post("/api/users", json={"username": ""})
    assert resp.status_code == 400
    assert "Username is required" in resp.get_json()["message"]


def test_api_lockdown(app, client):
    app.config["API_REQUIRE_ADMIN"] = True
    assert _create(client).status_code == 201
    assert client.get("/api/visitors").status_code == 401
    assert client.get("/api/statistics").status_code == 401

    with client.session_transaction() as sess:
        sess["is_admin"] = True
    assert client.get("/api/visitors").status_code == 200


def test_purpose_is_trimmed_and_date_with_junk_is_400(client):
    resp = _create(client, purpose=" ocular ")
    assert resp.status_code == 201
    assert resp.get_json()["purpose"] == "ocular"

    resp = client.get("/api/visitors", query_string={"date": "2025-03-14garbage"})
    assert resp.status_code == 400

from __future__ import annotations

import pytest

from mapmarks.app import create_app
from mapmarks.infrastructure.db import ENGINE, Base, SessionLocal
from mapmarks.infrastructure.db.models import Location, Session, User

CAFE = {"title": "Cafe", "rating": 4, "location": {"coordinates": [174.76, -36.85]}}


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def app():
    return create_app()


def register_and_login(client, username: str, password: str = "Abcdef1"):
    register = client.post("/api/auth/register", json={"username": username, "password": password})
    assert register.status_code == 201
    login = client.post("/api/auth/login", json={"username": username, "password": password})
    assert login.status_code == 200
    return login


def count(model) -> int:
    session = SessionLocal()
    try:
        return session.query(model).count()
    finally:
        session.close()


def test_alice_creates_and_lists_location(app) -> None:
    with app.test_client() as client:
        login = register_and_login(client, "alice1")
        assert login.get_json()["user"]["username"] == "alice1"
        assert client.get_cookie("sid") is not None

        created = client.post("/api/locations", json=CAFE)
        assert created.status_code == 201

        listing = client.get("/api/locations")

    items = listing.get_json()
    assert len(items) == 1
    assert items[0]["createdBy"]["username"] == "alice1"
    assert items[0]["location"]["coordinates"] == [174.76, -36.85]
    assert items[0]["position"] == {"lat": -36.85, "lng": 174.76}


def test_bob_cannot_delete_alices_location(app) -> None:
    with app.test_client() as alice:
        register_and_login(alice, "alice1")
        location_id = alice.post("/api/locations", json=CAFE).get_json()["id"]

    with app.test_client() as bob:
        register_and_login(bob, "bob1")
        response = bob.delete(f"/api/locations/{location_id}")
        assert response.status_code == 403
        assert len(bob.get("/api/locations").get_json()) == 1

    with app.test_client() as alice:
        alice.post("/api/auth/login", json={"username": "alice1", "password": "Abcdef1"})
        assert alice.delete(f"/api/locations/{location_id}").status_code == 200
        assert alice.delete(f"/api/locations/{location_id}").status_code == 404
    assert count(Location) == 0


def test_unknown_user_login_is_generic(app) -> None:
    with app.test_client() as client:
        register_and_login(client, "alice1")
        unknown = client.post("/api/auth/login", json={"username": "nouser", "password": "Abc123"})
        wrong = client.post("/api/auth/login", json={"username": "alice1", "password": "Wrong1x"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.get_json() == wrong.get_json()
    assert unknown.get_json()["error"] == "invalid_credentials"


def test_duplicate_registration_conflicts(app) -> None:
    with app.test_client() as client:
        register_and_login(client, "alice1")
        again = client.post(
            "/api/auth/register", json={"username": "alice1", "password": "Abcdef1"}
        )

    assert again.status_code == 409
    assert count(User) == 1


def test_logout_revokes_session(app) -> None:
    with app.test_client() as client:
        register_and_login(client, "alice1")
        stale_sid = client.get_cookie("sid").value
        assert client.get("/api/auth/me").status_code == 200

        assert client.post("/api/auth/logout").status_code == 200
        assert client.get_cookie("sid") is None

        client.set_cookie("sid", stale_sid)
        assert client.get("/api/auth/me").status_code == 401
        assert client.post("/api/locations", json=CAFE).status_code == 401
    assert count(Session) == 0


def test_relogin_replaces_previous_session(app) -> None:
    with app.test_client() as client:
        register_and_login(client, "alice1")
        client.post("/api/auth/login", json={"username": "alice1", "password": "Abcdef1"})

    assert count(Session) == 1


def test_profile_rename(app) -> None:
    with app.test_client() as client:
        register_and_login(client, "alice1")
        register_and_login(client, "bob1")

        taken = client.put("/api/users/profile", json={"username": "alice1"})
        renamed = client.put("/api/users/profile", json={"username": "bobby"})
        profile = client.get("/api/users/profile")

    assert taken.status_code == 409
    assert renamed.status_code == 200
    assert profile.get_json()["username"] == "bobby"
    assert profile.get_json()["lastLogin"] is not None
    with SessionLocal() as session:
        assert [row.username for row in session.query(Session)] == ["bobby"]


def test_search_and_validation(app) -> None:
    with app.test_client() as client:
        register_and_login(client, "alice1")
        client.post("/api/locations", json=CAFE)
        client.post(
            "/api/locations",
            json={**CAFE, "title": "Museum", "description": "Old maps", "price": 0},
        )
        bad = client.post("/api/locations", json={**CAFE, "price": -0.01})

        found = client.get("/api/locations", query_string={"q": "maps"}).get_json()

    assert bad.status_code == 400
    assert bad.get_json()["context"]["field"] == "price"
    assert [item["title"] for item in found] == ["Museum"]
    assert found[0]["price"] == 0


def test_missing_location_and_health(app) -> None:
    with app.test_client() as client:
        missing = client.get("/api/locations/999")
        health = client.get("/api/health")

    assert missing.status_code == 404
    assert missing.get_json()["error"] == "location_not_found"
    assert health.status_code == 200
    assert health.get_json()["ok"] is True
    assert health.get_json()["database"] == "ok"
    assert health.headers["X-Content-Type-Options"] == "nosniff"


def test_oversized_input_maps_to_client_errors(app) -> None:
    with app.test_client() as client:
        register_and_login(client, "alice1")
        huge_price = client.post(
            "/api/locations",
            data='{"title": "Cafe", "rating": 4, "location": {"coordinates": [1, 2]}, '
            '"price": 1' + "0" * 400 + "}",
            content_type="application/json",
        )
        object_coordinates = client.post(
            "/api/locations",
            json={**CAFE, "location": {"coordinates": {"lon": 1, "lat": 2}}},
        )
        huge_id_get = client.get("/api/locations/99999999999999999999999")
        huge_id_delete = client.delete("/api/locations/99999999999999999999999")

    assert huge_price.status_code == 400
    assert huge_price.get_json()["context"]["field"] == "price"
    assert object_coordinates.status_code == 400
    assert object_coordinates.get_json()["context"]["field"] == "location.coordinates"
    assert huge_id_get.status_code == 404
    assert huge_id_delete.status_code == 404
    assert count(Location) == 0

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from mapmarks.application.use_cases.users.login_user import LoginResult
from mapmarks.application.use_cases.users.register_user import RegisterUserUseCase
from mapmarks.domain.locations.entities import GeoPoint, Location, Owner
from mapmarks.domain.locations.exceptions import ForbiddenError
from mapmarks.domain.users.entities import Identity, IssuedSession, User
from mapmarks.domain.users.exceptions import InvalidCredentialsError, NoSessionError
from mapmarks.interfaces.http.controllers.auth_controller import AuthController
from mapmarks.interfaces.http.controllers.locations_controller import LocationsController
from mapmarks.interfaces.http.middleware.access import AccessGuard
from mapmarks.shared.errors import StorageError
from mapmarks.shared.errors import register_error_handler

ALICE = Identity(user_id=1, username="alice1")
NOW = datetime(2024, 1, 1, tzinfo=UTC)


def make_user() -> User:
    return User(id=1, username="alice1", password_hash="hash", created_at=NOW)


def make_location() -> Location:
    return Location(
        id=5,
        title="Cafe",
        description=None,
        rating=4.0,
        price=None,
        point=GeoPoint(longitude=174.76, latitude=-36.85),
        created_by=Owner(id=1, username="alice1"),
        created_at=NOW,
    )


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    register_error_handler(app)
    return app


@pytest.fixture()
def issuer() -> MagicMock:
    issuer = MagicMock()
    issuer.validate.return_value = ALICE
    return issuer


@pytest.fixture()
def guard(issuer: MagicMock) -> AccessGuard:
    return AccessGuard(issuer=issuer, cookie_name="sid")


def auth_controller(guard: AccessGuard, **overrides) -> AuthController:
    deps = {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "logout_use_case": MagicMock(),
        "current_user_use_case": MagicMock(),
        "guard": guard,
    }
    deps.update(overrides)
    return AuthController(**deps)


def test_register_returns_created(flask_app: Flask, guard: AccessGuard) -> None:
    register_called: dict[str, tuple[str, str]] = {}

    class StubRegister:
        def execute(self, username: str, password: str) -> User:
            register_called["args"] = (username, password)
            return make_user()

    controller = auth_controller(
        guard, register_use_case=cast(RegisterUserUseCase, StubRegister())
    )
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register", json={"username": "alice1", "password": "Abcdef1"}
        )

    assert response.status_code == 201
    assert response.get_json() == {"message": "Registration successful"}
    assert register_called["args"] == ("alice1", "Abcdef1")
    assert "Set-Cookie" not in response.headers


def test_register_rejects_non_string_fields(flask_app: Flask, guard: AccessGuard) -> None:
    flask_app.register_blueprint(auth_controller(guard).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/register", json={"username": 12, "password": "x"})

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert payload["context"]["field"] == "username"


def test_login_sets_session_cookie(flask_app: Flask, guard: AccessGuard) -> None:
    login = MagicMock()
    login.execute.return_value = LoginResult(
        user=make_user(),
        session=IssuedSession(session_id="sid-123", token="jwt.token.value", expires_at=NOW,
                              identity=ALICE),
    )
    flask_app.register_blueprint(auth_controller(guard, login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("sid", "previous")
        response = client.post(
            "/api/auth/login", json={"username": "alice1", "password": "Abcdef1"}
        )

    assert response.status_code == 200
    assert response.get_json() == {
        "token": "jwt.token.value",
        "user": {"id": 1, "username": "alice1"},
    }
    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("sid=sid-123")
    assert "HttpOnly" in cookie
    login.execute.assert_called_once_with("alice1", "Abcdef1", previous_session_id="previous")


def test_login_failure_is_generic(flask_app: Flask, guard: AccessGuard) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(auth_controller(guard, login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/auth/login", json={"username": "nouser", "password": "x"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_credentials"
    assert "nouser" not in response.get_data(as_text=True)


def test_me_requires_session(flask_app: Flask, guard: AccessGuard, issuer: MagicMock) -> None:
    issuer.validate.side_effect = NoSessionError()
    flask_app.register_blueprint(auth_controller(guard).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.get_json()["error"] == "unauthenticated"
    issuer.validate.assert_called_once_with(None)


def test_me_hides_password_hash(flask_app: Flask, guard: AccessGuard) -> None:
    current = MagicMock()
    current.execute.return_value = make_user()
    flask_app.register_blueprint(
        auth_controller(guard, current_user_use_case=current).as_blueprint()
    )

    with flask_app.test_client() as client:
        client.set_cookie("sid", "abc")
        response = client.get("/api/auth/me")

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["username"] == "alice1"
    assert "password_hash" not in payload and "passwordHash" not in payload
    current.execute.assert_called_once_with(ALICE)


def test_location_payload_shape(flask_app: Flask, guard: AccessGuard) -> None:
    store = MagicMock()
    store.get_by_id.return_value = make_location()
    flask_app.register_blueprint(LocationsController(store=store, guard=guard).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/locations/5")

    assert response.status_code == 200
    assert response.get_json() == {
        "id": 5,
        "title": "Cafe",
        "description": None,
        "rating": 4.0,
        "price": None,
        "location": {"type": "Point", "coordinates": [174.76, -36.85]},
        "position": {"lat": -36.85, "lng": 174.76},
        "createdBy": {"id": 1, "username": "alice1"},
        "createdAt": "2024-01-01T00:00:00Z",
    }


def test_delete_forbidden_maps_to_403(flask_app: Flask, guard: AccessGuard) -> None:
    store = MagicMock()
    store.delete.side_effect = ForbiddenError()
    flask_app.register_blueprint(LocationsController(store=store, guard=guard).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("sid", "abc")
        response = client.delete("/api/locations/5")

    assert response.status_code == 403
    assert response.get_json()["error"] == "forbidden"
    store.delete.assert_called_once_with(5, ALICE)


def test_create_requires_json_object(flask_app: Flask, guard: AccessGuard) -> None:
    store = MagicMock()
    flask_app.register_blueprint(LocationsController(store=store, guard=guard).as_blueprint())

    with flask_app.test_client() as client:
        client.set_cookie("sid", "abc")
        response = client.post("/api/locations", json=[1, 2])

    assert response.status_code == 400
    store.create.assert_not_called()


def test_storage_failure_body_is_generic(flask_app: Flask, guard: AccessGuard) -> None:
    store = MagicMock()
    store.list.side_effect = StorageError("locations.list_page")
    flask_app.register_blueprint(LocationsController(store=store, guard=guard).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/locations")

    assert response.status_code == 500
    assert response.get_json() == {"error": "storage_error"}


def test_unexpected_error_is_internal_error(flask_app: Flask, guard: AccessGuard) -> None:
    store = MagicMock()
    store.get_by_id.side_effect = RuntimeError("boom at /var/db")
    flask_app.register_blueprint(LocationsController(store=store, guard=guard).as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/locations/1")

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}

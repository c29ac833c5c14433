from __future__ import annotations

from collections.abc import Iterator

import jwt
import pytest

from users_service.app import create_internal_app, create_public_app
from users_service.infrastructure.container import Container
from users_service.shared.config import (
    AppConfig,
    CacheConfig,
    DatabaseConfig,
    SecurityConfig,
    SessionConfig,
)
from users_service.tests.fakes import SIGNING_KEY


@pytest.fixture()
def container() -> Iterator[Container]:
    config = AppConfig(
        database=DatabaseConfig(url="sqlite://"),
        cache=CacheConfig(url="memory://"),
        security=SecurityConfig(password_hash_method="pbkdf2:sha256:1000"),
        session=SessionConfig(signing_key=SIGNING_KEY, issuer="users-it"),
    )
    container = Container(config)
    container.init_db()
    yield container
    container.close()


def test_account_lifecycle_end_to_end(container: Container) -> None:
    public = create_public_app(container).test_client()
    internal = create_internal_app(container).test_client()
    credentials = {"email": "alice@example.com", "password": "secret123"}

    assert public.post("/register", json=credentials).status_code == 204
    assert public.post("/register", json=credentials).status_code == 409

    listing = public.get("/").get_json()
    assert [(u["email"], u["activated"]) for u in listing] == [("alice@example.com", False)]
    assert "password_hash" not in listing[0]
    assert "activation_code" not in listing[0]

    stored = container.user_repository.find_by_email("alice@example.com")
    assert stored is not None and stored.activation_code is not None

    wrong = public.post("/activate", json={"email": "alice@example.com", "code": "f" * 16})
    assert wrong.status_code == 400
    activated = public.post(
        "/activate", json={"email": "alice@example.com", "code": stored.activation_code}
    )
    assert activated.status_code == 204
    replay = public.post(
        "/activate", json={"email": "alice@example.com", "code": stored.activation_code}
    )
    assert replay.status_code == 400

    bad_login = public.post("/login", json={**credentials, "password": "nope"})
    assert bad_login.status_code == 400

    login = public.post("/login", json=credentials)
    assert login.status_code == 204
    bearer = login.headers["Authorization"]
    assert bearer.startswith("Bearer ")

    authorized = internal.get("/authorize/", headers={"Authorization": bearer})
    assert authorized.status_code == 200
    assertion = authorized.headers["Authorization"].removeprefix("Bearer ")
    claims = jwt.decode(assertion, SIGNING_KEY, algorithms=["HS256"], issuer="users-it")
    assert claims["sub"] == stored.id
    assert claims["exp"] - claims["iat"] == container.config.session.ttl_seconds

    unknown = internal.get("/authorize/", headers={"Authorization": "Bearer " + "0" * 48})
    assert unknown.status_code == 401


def test_health_reports_store_and_cache(container: Container) -> None:
    internal = create_internal_app(container).test_client()

    response = internal.get("/healthz")

    assert response.status_code == 200
    assert response.get_json() == {"ok": True, "database": "ok", "cache": "ok"}


def test_request_id_header_is_echoed_in_errors(container: Container) -> None:
    public = create_public_app(container).test_client()

    response = public.post("/login", json={}, headers={"X-Request-ID": "trace-1"})

    assert response.status_code == 422
    assert response.get_json()["request_id"] == "trace-1"

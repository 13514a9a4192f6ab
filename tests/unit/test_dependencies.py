"""
Unit tests for FastAPI dependency injection and the admin gate.
"""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import Mock, patch

import jwt
import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from khael_apartments.dependencies import (
    get_db_engine,
    get_media_host,
    optional_admin,
    require_admin,
)
from khael_apartments.errors import AuthenticationError, ServerError
from khael_apartments.services.auth import AdminIdentity, create_access_token
from khael_apartments.services.media import CloudinaryMediaHost

ADMIN = AdminIdentity(id=7, username="ops")


def fake_request() -> SimpleNamespace:
    return SimpleNamespace(state=SimpleNamespace())


@pytest.mark.unit
def test_get_db_engine_dependency() -> None:
    """Test that get_db_engine yields the shared engine instance."""
    engine1 = next(get_db_engine())
    engine2 = next(get_db_engine())

    assert isinstance(engine1, Engine)
    assert engine1 is engine2


@pytest.mark.unit
def test_get_media_host_returns_cloudinary_host() -> None:
    assert isinstance(get_media_host(), CloudinaryMediaHost)


@pytest.mark.unit
def test_dependency_injection_can_be_overridden() -> None:
    """Test that the engine dependency can be overridden for testing."""
    app = FastAPI()

    @app.get("/test")
    def engine_endpoint(engine: Engine = Depends(get_db_engine)) -> dict[str, str]:
        return {"engine_name": engine.name}

    mock_engine = Mock(spec=Engine)
    mock_engine.name = "mock_engine"
    app.dependency_overrides[get_db_engine] = lambda: mock_engine

    response = TestClient(app).get("/test")

    assert response.status_code == 200
    assert response.json() == {"engine_name": "mock_engine"}


@pytest.mark.unit
def test_require_admin_returns_identity_and_sets_state() -> None:
    request = fake_request()
    token = create_access_token(ADMIN)

    identity = require_admin(request, authorization=f"Bearer {token}")

    assert identity == ADMIN
    assert request.state.admin == ADMIN


@pytest.mark.unit
@pytest.mark.parametrize(
    "header,error",
    [
        (None, "No authorization token provided"),
        ("", "No authorization token provided"),
        ("Basic dXNlcjpwYXNz", "Invalid token format"),
        ("Bearer", "Invalid token format"),
        ("Bearer garbage.token.value", "Invalid token"),
    ],
)
def test_require_admin_rejects_bad_headers(header: str, error: str) -> None:
    with pytest.raises(AuthenticationError) as exc_info:
        require_admin(fake_request(), authorization=header)

    assert exc_info.value.error == error
    assert exc_info.value.status_code == 401


@pytest.mark.unit
def test_require_admin_reports_expired_token() -> None:
    token = create_access_token(ADMIN, expires_in=timedelta(minutes=-1))

    with pytest.raises(AuthenticationError) as exc_info:
        require_admin(fake_request(), authorization=f"Bearer {token}")

    assert exc_info.value.error == "Token expired"


@pytest.mark.unit
def test_require_admin_maps_unexpected_failures_to_server_error() -> None:
    with patch(
        "khael_apartments.dependencies.decode_access_token",
        side_effect=TypeError("bad key material"),
    ):
        with pytest.raises(ServerError) as exc_info:
            require_admin(fake_request(), authorization="Bearer whatever")

    assert exc_info.value.error == "Authentication failed"
    assert exc_info.value.status_code == 500


@pytest.mark.unit
def test_optional_admin_accepts_valid_token() -> None:
    token = create_access_token(ADMIN)

    assert optional_admin(authorization=f"Bearer {token}") == ADMIN


@pytest.mark.unit
@pytest.mark.parametrize("header", [None, "Bearer nope", "Token abc"])
def test_optional_admin_ignores_missing_or_bad_tokens(header: str) -> None:
    assert optional_admin(authorization=header) is None


@pytest.mark.unit
def test_optional_admin_ignores_expired_tokens() -> None:
    token = create_access_token(ADMIN, expires_in=timedelta(seconds=-1))

    assert optional_admin(authorization=f"Bearer {token}") is None


@pytest.mark.unit
def test_optional_admin_ignores_tokens_signed_with_another_secret() -> None:
    forged = jwt.encode({"id": 1, "username": "admin", "iat": 0, "exp": 9999999999}, "x" * 32)

    assert optional_admin(authorization=f"Bearer {forged}") is None

"""
Integration tests for the error envelope rendered by the app-level exception handlers.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from khael_apartments.main import app


@pytest.mark.integration
def test_unknown_route_returns_route_not_found(client: TestClient) -> None:
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json() == {"error": "Route not found", "message": "Cannot GET /api/nowhere"}


@pytest.mark.integration
def test_non_numeric_id_is_a_validation_error(client: TestClient) -> None:
    response = client.get("/api/apartments/abc")

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert body["details"][0]["field"] == "path.apartment_id"


@pytest.mark.integration
def test_unhandled_exception_returns_500_with_stack_outside_production(
    client: TestClient,
) -> None:
    with patch(
        "khael_apartments.routes.auth.create_access_token",
        side_effect=ZeroDivisionError("handler bug"),
    ):
        response = client.post(
            "/api/admin/login", json={"username": "admin", "password": "admin123"}
        )

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal server error"
    assert body["message"] == "handler bug"
    assert "ZeroDivisionError" in body["stack"]


@pytest.mark.integration
def test_unhandled_exception_keeps_request_id(client: TestClient) -> None:
    with patch(
        "khael_apartments.routes.auth.create_access_token",
        side_effect=ZeroDivisionError("handler bug"),
    ):
        response = client.post(
            "/api/admin/login", json={"username": "admin", "password": "admin123"}
        )

    assert response.status_code == 500
    assert len(response.headers["X-Request-ID"]) == 36


@pytest.mark.integration
def test_unhandled_exception_hides_stack_in_production(client: TestClient) -> None:
    with patch("khael_apartments.main.IS_PRODUCTION", True), patch(
        "khael_apartments.routes.auth.create_access_token",
        side_effect=ZeroDivisionError("handler bug"),
    ):
        response = client.post(
            "/api/admin/login", json={"username": "admin", "password": "admin123"}
        )

    assert response.status_code == 500
    assert "stack" not in response.json()


@pytest.mark.asyncio
async def test_responses_carry_request_id() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/api/health")

    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 36


@pytest.mark.asyncio
async def test_cors_allows_frontend_origin() -> None:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.options(
            "/api/apartments",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
            },
        )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert response.headers["access-control-allow-credentials"] == "true"

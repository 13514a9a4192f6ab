"""
Shared fixtures for the API test suite.

Configuration is read at import time, so the environment is prepared before
anything from khael_apartments is imported.
"""

from __future__ import annotations

import os

os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-bytes-for-hs256")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["APP_ENV"] = "test"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "admin123"
os.environ["ALLOWED_ORIGINS"] = "http://localhost:5173"

from typing import Any, Generator, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from khael_apartments.db.bootstrap import initialize_database  # noqa: E402
from khael_apartments.db.engine import create_db_engine  # noqa: E402
from khael_apartments.dependencies import get_db_engine, get_media_host  # noqa: E402
from khael_apartments.main import app  # noqa: E402
from khael_apartments.services.auth import AdminIdentity, create_access_token  # noqa: E402
from khael_apartments.services.media import UploadedMedia  # noqa: E402


class FakeMediaHost:
    """
    In-memory stand-in for the Cloudinary host.

    Records every upload and destroy call. ``fail_on_upload`` makes the
    n-th upload (0-based) raise; ``fail_destroy`` makes every destroy raise.
    """

    def __init__(self) -> None:
        self.uploads: list[dict[str, Any]] = []
        self.destroyed: list[tuple[str, str]] = []
        self.fail_on_upload: Optional[int] = None
        self.fail_destroy = False

    def upload(
        self,
        data: bytes,
        folder: str,
        filename: str,
        resource_type: str = "image",
        transformation: Optional[list[dict[str, Any]]] = None,
    ) -> UploadedMedia:
        if self.fail_on_upload is not None and len(self.uploads) == self.fail_on_upload:
            raise RuntimeError("media host unavailable")

        name = f"asset{len(self.uploads) + 1}"
        extension = "mp4" if resource_type == "video" else "jpg"
        self.uploads.append(
            {
                "folder": folder,
                "filename": filename,
                "resource_type": resource_type,
                "transformation": transformation,
                "size": len(data),
            }
        )
        return UploadedMedia(
            url=f"https://res.cloudinary.com/demo/{resource_type}/upload/v1712/{folder}/{name}.{extension}",
            public_id=f"{folder}/{name}",
            size=len(data),
            filename=filename,
        )

    def destroy(self, public_id: str, resource_type: str = "image") -> None:
        if self.fail_destroy:
            raise RuntimeError("media host refused delete")
        self.destroyed.append((public_id, resource_type))


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """Fresh in-memory store with tables and the default admin."""
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def media_host() -> FakeMediaHost:
    return FakeMediaHost()


@pytest.fixture
def client(db_engine: Engine, media_host: FakeMediaHost) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the in-memory store and the fake media host."""
    app.dependency_overrides[get_db_engine] = lambda: db_engine
    app.dependency_overrides[get_media_host] = lambda: media_host

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()


@pytest.fixture
def admin_token() -> str:
    return create_access_token(AdminIdentity(id=1, username="admin"))


@pytest.fixture
def auth_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def apartment_payload() -> dict[str, Any]:
    return {
        "title": "Test",
        "bedrooms": 2,
        "bathrooms": 1,
        "max_guests": 3,
        "price_per_night": 20000,
        "address": "12 Aminu Kano Crescent",
        "city": "Abuja",
        "state": "FCT",
    }


@pytest.fixture
def create_apartment(client: TestClient, auth_headers: dict[str, str], apartment_payload: dict[str, Any]):
    """Factory that creates an apartment through the API and returns its payload."""

    def _create(**overrides: Any) -> dict[str, Any]:
        response = client.post(
            "/api/apartments", json={**apartment_payload, **overrides}, headers=auth_headers
        )
        assert response.status_code == 201, response.text
        return response.json()["apartment"]

    return _create

"""
Integration tests for store initialization against a throwaway in-memory engine.
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from khael_apartments.db.bootstrap import add_sample_data, ensure_default_admin, initialize_database
from khael_apartments.db.engine import check_engine_health, create_db_engine
from khael_apartments.db.readers.admins import get_admin_by_username
from khael_apartments.models.admins import AdminUser
from khael_apartments.models.apartments import Apartment, ApartmentImage
from khael_apartments.models.base import Base
from khael_apartments.services.auth import verify_password


@pytest.fixture
def bare_engine():
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    yield engine
    engine.dispose()


def count(engine: Engine, column) -> int:
    with engine.connect() as conn:
        return int(conn.execute(select(func.count(column))).scalar())


@pytest.mark.integration
def test_initialize_database_creates_default_admin_once(bare_engine: Engine) -> None:
    initialize_database(bare_engine)
    initialize_database(bare_engine)

    assert count(bare_engine, AdminUser.id) == 1
    with bare_engine.connect() as conn:
        admin = get_admin_by_username(conn, "admin")
    assert admin is not None
    assert admin["password"] != "admin123"
    assert verify_password("admin123", admin["password"])


@pytest.mark.integration
def test_ensure_default_admin_skips_when_an_admin_exists(bare_engine: Engine) -> None:
    initialize_database(bare_engine)

    assert ensure_default_admin(bare_engine, username="second", password="pw") is False
    assert count(bare_engine, AdminUser.id) == 1


@pytest.mark.integration
def test_ensure_default_admin_accepts_a_long_password(bare_engine: Engine) -> None:
    Base.metadata.create_all(bare_engine)

    assert ensure_default_admin(bare_engine, username="owner", password="p" * 100) is True
    with bare_engine.connect() as conn:
        admin = get_admin_by_username(conn, "owner")
    assert verify_password("p" * 100, admin["password"])


@pytest.mark.integration
def test_sample_data_is_seeded_once_with_primary_image(bare_engine: Engine) -> None:
    initialize_database(bare_engine, seed_sample_data=True)

    assert add_sample_data(bare_engine) is False
    assert count(bare_engine, Apartment.id) == 1
    assert count(bare_engine, ApartmentImage.id) == 3
    with bare_engine.connect() as conn:
        primaries = conn.execute(
            select(ApartmentImage.display_order).where(ApartmentImage.is_primary.is_(True))
        ).scalars().all()
    assert primaries == [0]


@pytest.mark.integration
def test_foreign_keys_cascade_on_sqlite(bare_engine: Engine) -> None:
    initialize_database(bare_engine, seed_sample_data=True)

    with bare_engine.begin() as conn:
        conn.execute(Apartment.__table__.delete())

    assert count(bare_engine, ApartmentImage.id) == 0


@pytest.mark.integration
def test_check_engine_health(bare_engine: Engine) -> None:
    assert check_engine_health(bare_engine) is True

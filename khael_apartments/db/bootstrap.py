"""
Store initialization run at application startup and by the operational scripts.

Creates missing tables, provisions the default admin when the admin table is
empty, and optionally inserts a sample apartment for local development.
"""

from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.engine import Engine

from khael_apartments.config import ADMIN_PASSWORD, ADMIN_USERNAME
from khael_apartments.db.readers.admins import any_admin_exists
from khael_apartments.db.writers.admins import insert_admin
from khael_apartments.db.writers.apartments import insert_apartment
from khael_apartments.db.writers.media import insert_image, set_primary_image
from khael_apartments.models.apartments import Apartment
from khael_apartments.models.base import Base
from khael_apartments.services.auth import hash_password

logger = structlog.get_logger(__name__)

SAMPLE_APARTMENT = {
    "title": "Luxury 2-Bedroom Apartment in Abuja",
    "description": (
        "Beautiful modern apartment with stunning city views. Fully furnished with "
        "high-speed internet, Smart TV, and modern kitchen appliances."
    ),
    "bedrooms": 2,
    "bathrooms": 2,
    "max_guests": 4,
    "price_per_night": 35000.0,
    "address": "123 Cadastral Zone, Maitama",
    "city": "Abuja",
    "state": "FCT",
    "available": True,
    "featured": False,
    "amenities": ["WiFi", "Smart TV", "Air Conditioning", "Kitchen"],
}

SAMPLE_IMAGE_URLS = (
    "/uploads/images/sample1.jpg",
    "/uploads/images/sample2.jpg",
    "/uploads/images/sample3.jpg",
)


def ensure_default_admin(
    engine: Engine,
    username: str = ADMIN_USERNAME,
    password: str = ADMIN_PASSWORD,
) -> bool:
    """
    Create the default admin if no admin exists yet.

    Returns:
        bool: True if an admin was created.
    """
    with engine.begin() as conn:
        if any_admin_exists(conn):
            logger.info("default_admin_exists")
            return False
        admin_id = insert_admin(conn, username, hash_password(password))

    logger.warning(
        "default_admin_created",
        admin_id=admin_id,
        username=username,
        hint="change the default password before going to production",
    )
    return True


def add_sample_data(engine: Engine) -> bool:
    """
    Insert one sample apartment with three images, unless any apartment exists.

    Returns:
        bool: True if the sample was inserted.
    """
    with engine.begin() as conn:
        if conn.execute(select(Apartment.id).limit(1)).first() is not None:
            logger.info("sample_data_exists")
            return False

        apartment_id = insert_apartment(conn, SAMPLE_APARTMENT)
        image_ids = [
            insert_image(conn, apartment_id, url, order)
            for order, url in enumerate(SAMPLE_IMAGE_URLS)
        ]
        set_primary_image(conn, apartment_id, image_ids[0])

    logger.info("sample_data_added", apartment_id=apartment_id, images=len(SAMPLE_IMAGE_URLS))
    return True


def initialize_database(engine: Engine, seed_sample_data: bool = False) -> None:
    """
    Create tables, provision the default admin and optionally seed a sample listing.

    Args:
        engine: Engine for the listing store
        seed_sample_data: Insert the sample apartment when the store is empty
    """
    Base.metadata.create_all(engine)
    logger.info("database_tables_ready")

    ensure_default_admin(engine)

    if seed_sample_data:
        add_sample_data(engine)

from typing import Any

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from khael_apartments.models.apartments import Apartment
from khael_apartments.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_apartment(conn: Connection, data: dict[str, Any]) -> int:
    """
    Insert a new apartment row.

    Args:
        conn (Connection): SQLAlchemy DB connection (inside a transaction).
        data (dict): Column values; created_at/updated_at are stamped here.

    Returns:
        int: ID of the new apartment.
    """
    now = utc_now()
    row = {**data, "created_at": now, "updated_at": now}

    result = conn.execute(insert(Apartment).values(**row))
    apartment_id = int(result.inserted_primary_key[0])

    logger.debug("apartment_inserted", apartment_id=apartment_id)
    return apartment_id


def update_apartment(conn: Connection, apartment_id: int, data: dict[str, Any]) -> None:
    """
    Apply a partial update to an existing apartment.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        apartment_id (int): Apartment ID.
        data (dict): Allow-listed fields to change.
    """
    values = {**data, "updated_at": utc_now()}

    stmt = update(Apartment).where(Apartment.id == apartment_id).values(**values)
    conn.execute(stmt)


def delete_apartment(conn: Connection, apartment_id: int) -> None:
    """
    Delete an apartment. Its images and videos go with it through ON DELETE CASCADE.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        apartment_id (int): Apartment ID.
    """
    stmt = delete(Apartment).where(Apartment.id == apartment_id)
    conn.execute(stmt)

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from khael_apartments.models.admins import AdminUser


def any_admin_exists(conn: Connection) -> bool:
    """
    Check whether at least one admin has been provisioned.

    Args:
        conn (Connection): An active SQLAlchemy database connection.

    Returns:
        bool: True if the admin_users table has any row.
    """
    return conn.execute(select(AdminUser.id).limit(1)).first() is not None


def get_admin_by_username(conn: Connection, username: str) -> Optional[dict[str, Any]]:
    """
    Fetch an admin's id, username and password hash.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        username (str): Exact username to look up.

    Returns:
        Optional[dict]: Admin row or None if not found.
    """
    row = (
        conn.execute(
            select(AdminUser.id, AdminUser.username, AdminUser.password).where(
                AdminUser.username == username
            )
        )
        .mappings()
        .first()
    )
    return dict(row) if row else None

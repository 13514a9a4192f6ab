from sqlalchemy import insert
from sqlalchemy.engine import Connection

from khael_apartments.models.admins import AdminUser
from khael_apartments.utils.datetime import utc_now


def insert_admin(conn: Connection, username: str, password_hash: str) -> int:
    """
    Insert an admin with an already-hashed password.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        username (str): Unique username.
        password_hash (str): bcrypt hash of the password.

    Returns:
        int: ID of the new admin.
    """
    result = conn.execute(
        insert(AdminUser).values(username=username, password=password_hash, created_at=utc_now())
    )
    return int(result.inserted_primary_key[0])

"""
SQLAlchemy engine for the listing store.

The module-level ``engine`` is built from DATABASE_URL and handed to route
handlers through ``khael_apartments.dependencies.get_db_engine``. Tests and
scripts build their own with ``create_db_engine``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url

from khael_apartments.config import DATABASE_URL


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(url: str, **overrides: Any) -> Engine:
    """
    Create an engine with pool settings suited to the target dialect.

    Server databases get a bounded connection pool; SQLite gets
    ``check_same_thread=False`` (FastAPI runs sync handlers in a threadpool)
    and foreign-key enforcement so image/video rows cascade with their
    apartment.

    Args:
        url: SQLAlchemy database URL
        **overrides: Extra keyword arguments for ``create_engine``
            (e.g. ``poolclass=StaticPool`` for in-memory test databases)

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    is_sqlite = make_url(url).get_backend_name() == "sqlite"

    options: dict[str, Any] = {"future": True, "echo": False}
    if is_sqlite:
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,  # detect stale connections
            pool_recycle=3600,
        )
    options.update(overrides)

    db_engine = create_engine(url, **options)

    if is_sqlite:
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)

    return db_engine


engine: Engine = create_db_engine(DATABASE_URL)


def check_engine_health(db_engine: Engine) -> bool:
    """
    Check if the database is reachable.

    Used by the readiness endpoint before the service accepts traffic.

    Args:
        db_engine: Engine to probe

    Returns:
        bool: True if a trivial query succeeds, False otherwise
    """
    try:
        with db_engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False

"""
FastAPI dependency injection providers.

Handlers never touch the module-level engine or media host directly; they
receive them through these providers, which tests replace with
``app.dependency_overrides``.

Example:
    >>> from fastapi import Depends
    >>> from khael_apartments.dependencies import get_db_engine, require_admin
    >>>
    >>> @router.post("/apartments")
    >>> def create_apartment(
    ...     payload: ApartmentCreatePayload,
    ...     engine: Engine = Depends(get_db_engine),
    ...     admin: AdminIdentity = Depends(require_admin),
    ... ):
    ...     with engine.begin() as conn:
    ...         ...
"""

from __future__ import annotations

from typing import Any, Generator, Optional

import jwt
import structlog
from fastapi import Header, Request
from sqlalchemy.engine import Engine

from khael_apartments.db.engine import engine
from khael_apartments.errors import AuthenticationError, ServerError
from khael_apartments.services.auth import (
    AdminIdentity,
    decode_access_token,
    extract_bearer_token,
)
from khael_apartments.services.media import media_host

logger = structlog.get_logger(__name__)


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide the database engine.

    Yields:
        Engine: SQLAlchemy database engine
    """
    yield engine


def get_media_host() -> Any:
    """Provide the external media host client."""
    return media_host


def require_admin(
    request: Request,
    authorization: Optional[str] = Header(None),
) -> AdminIdentity:
    """
    Gate a route to authenticated admins.

    The decoded identity is returned and also stored on
    ``request.state.admin``.

    Raises:
        AuthenticationError: Header missing, not a Bearer header, token invalid or expired
        ServerError: Any other verification failure
    """
    if not authorization:
        raise AuthenticationError("No authorization token provided", "Please login first")

    token = extract_bearer_token(authorization)
    if token is None:
        raise AuthenticationError("Invalid token format", "Token should be: Bearer <token>")

    try:
        identity = decode_access_token(token)
    except jwt.ExpiredSignatureError:
        raise AuthenticationError(
            "Token expired", "Your session has expired. Please login again"
        )
    except jwt.InvalidTokenError:
        raise AuthenticationError("Invalid token", "Please login again")
    except Exception as e:
        logger.exception("token_verification_failed", error=str(e))
        raise ServerError("Authentication failed", str(e)) from e

    request.state.admin = identity
    return identity


def optional_admin(authorization: Optional[str] = Header(None)) -> Optional[AdminIdentity]:
    """
    Identify an admin caller without rejecting anyone.

    Used by the public catalog to decide whether reserved listings are
    included. The token is fully verified; an absent, malformed or expired
    token simply means a public caller.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        return None

    try:
        return decode_access_token(token)
    except jwt.PyJWTError as e:
        logger.info("catalog_token_ignored", reason=type(e).__name__)
        return None

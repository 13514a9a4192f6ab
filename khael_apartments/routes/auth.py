from typing import Any

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.engine import Engine

from khael_apartments.dependencies import get_db_engine, require_admin
from khael_apartments.errors import AuthenticationError, ServerError, ValidationError
from khael_apartments.metrics import login_attempts
from khael_apartments.schemas.auth import LoginPayload
from khael_apartments.services.auth import (
    AdminIdentity,
    authenticate_admin,
    create_access_token,
)

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("/admin/login")
def login(
    payload: LoginPayload,
    engine: Engine = Depends(get_db_engine),
) -> dict[str, Any]:
    """
    Exchange admin credentials for an access token.

    Unknown usernames and wrong passwords produce the same 401 body.

    Args:
        payload: username and password

    Returns:
        dict: success flag, message, token and the admin's id and username
    """
    if not payload.username or not payload.password:
        raise ValidationError("Missing credentials", "Username and password are required")

    try:
        with engine.connect() as conn:
            identity = authenticate_admin(conn, payload.username, payload.password)
    except Exception as e:
        logger.exception("admin_login_failed", error=str(e))
        raise ServerError("Login failed", str(e)) from e

    if identity is None:
        login_attempts.labels(status="failure").inc()
        logger.warning("admin_login_rejected", username=payload.username)
        raise AuthenticationError("Invalid credentials", "Username or password is incorrect")

    token = create_access_token(identity)

    login_attempts.labels(status="success").inc()
    logger.info("admin_logged_in", admin_id=identity.id, username=identity.username)

    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "admin": identity.as_dict(),
    }


@router.get("/admin/verify")
def verify(admin: AdminIdentity = Depends(require_admin)) -> dict[str, Any]:
    """Confirm a token is still valid and echo the admin it belongs to."""
    return {"success": True, "message": "Token is valid", "admin": admin.as_dict()}

"""
Admin credential checks and access-token handling.

Passwords are stored as salted bcrypt hashes. Access tokens are HS256 JWTs
signed with JWT_SECRET and carry the admin's id and username.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

import bcrypt
import jwt
import structlog
from sqlalchemy.engine import Connection

from khael_apartments.config import JWT_ALGORITHM, JWT_EXPIRES_HOURS, JWT_SECRET
from khael_apartments.db.readers.admins import get_admin_by_username
from khael_apartments.utils.datetime import utc_now

logger = structlog.get_logger(__name__)

BCRYPT_ROUNDS = 10

# bcrypt only uses the first 72 bytes; newer releases raise instead of truncating
BCRYPT_MAX_BYTES = 72

# Compared against when the username is unknown so both failure paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(
    b"not-a-real-password", bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
).decode("utf-8")


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


@dataclass(frozen=True)
class AdminIdentity:
    id: int
    username: str

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username}


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh bcrypt salt.

    Only the first 72 bytes take part, which is all bcrypt ever uses.

    Args:
        password (str): Plain-text password.

    Returns:
        str: bcrypt hash suitable for the admin_users.password column.
    """
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Check a plain-text password against a stored bcrypt hash.

    Passwords are cut to bcrypt's 72-byte limit, as older bcrypt releases
    did implicitly. A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("admin_password_hash_invalid")
        return False


def authenticate_admin(conn: Connection, username: str, password: str) -> Optional[AdminIdentity]:
    """
    Verify admin credentials.

    Unknown usernames and wrong passwords both return None so callers cannot
    tell them apart.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        username (str): Submitted username.
        password (str): Submitted password.

    Returns:
        Optional[AdminIdentity]: The admin on success, None otherwise.
    """
    admin = get_admin_by_username(conn, username)

    if admin is None:
        verify_password(password, _DUMMY_HASH)
        return None

    if not verify_password(password, admin["password"]):
        return None

    return AdminIdentity(id=admin["id"], username=admin["username"])


def create_access_token(identity: AdminIdentity, expires_in: Optional[timedelta] = None) -> str:
    """
    Issue a signed, time-limited access token for an admin.

    Args:
        identity (AdminIdentity): Authenticated admin.
        expires_in (Optional[timedelta]): Lifetime override (default JWT_EXPIRES_HOURS).

    Returns:
        str: Encoded JWT.
    """
    issued_at = utc_now()
    lifetime = expires_in if expires_in is not None else timedelta(hours=JWT_EXPIRES_HOURS)

    claims = {
        "id": identity.id,
        "username": identity.username,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> AdminIdentity:
    """
    Verify a token's signature and expiry and return the admin it names.

    Raises:
        jwt.ExpiredSignatureError: The token has expired.
        jwt.InvalidTokenError: The token is malformed, badly signed or lacks identity claims.
    """
    claims = jwt.decode(
        token,
        JWT_SECRET,
        algorithms=[JWT_ALGORITHM],
        options={"require": ["exp", "iat"]},
    )

    admin_id = claims.get("id")
    username = claims.get("username")
    if not isinstance(admin_id, int) or not isinstance(username, str):
        raise jwt.InvalidTokenError("Token is missing admin identity claims")

    return AdminIdentity(id=admin_id, username=username)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header value.

    Returns:
        Optional[str]: The token, or None if the header is not a Bearer header.
    """
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    return token

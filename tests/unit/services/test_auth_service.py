"""Unit tests for password hashing and access tokens."""

from datetime import timedelta

import jwt
import pytest

from khael_apartments.config import JWT_SECRET
from khael_apartments.services.auth import (
    AdminIdentity,
    create_access_token,
    decode_access_token,
    extract_bearer_token,
    hash_password,
    verify_password,
)


@pytest.mark.unit
def test_hash_password_is_salted_bcrypt() -> None:
    first = hash_password("admin123")
    second = hash_password("admin123")

    assert first.startswith("$2b$10$")
    assert first != second
    assert verify_password("admin123", first)
    assert verify_password("admin123", second)


@pytest.mark.unit
def test_verify_password_rejects_wrong_password() -> None:
    assert not verify_password("wrong", hash_password("admin123"))


@pytest.mark.unit
def test_passwords_past_72_bytes_hash_and_verify() -> None:
    stored = hash_password("y" * 100)

    assert verify_password("y" * 100, stored)
    assert not verify_password("z" * 100, stored)


@pytest.mark.unit
def test_verify_password_treats_malformed_hash_as_mismatch() -> None:
    assert verify_password("admin123", "plain-text-not-a-hash") is False


@pytest.mark.unit
def test_token_round_trip() -> None:
    token = create_access_token(AdminIdentity(id=3, username="desk"))

    assert decode_access_token(token) == AdminIdentity(id=3, username="desk")


@pytest.mark.unit
def test_token_lifetime_defaults_to_24_hours() -> None:
    token = create_access_token(AdminIdentity(id=1, username="admin"))
    claims = jwt.decode(token, JWT_SECRET, algorithms=["HS256"])

    assert claims["exp"] - claims["iat"] == 24 * 60 * 60


@pytest.mark.unit
def test_expired_token_raises() -> None:
    token = create_access_token(
        AdminIdentity(id=1, username="admin"), expires_in=timedelta(seconds=-10)
    )

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


@pytest.mark.unit
def test_token_without_expiry_is_rejected() -> None:
    token = jwt.encode({"id": 1, "username": "admin", "iat": 0}, JWT_SECRET, algorithm="HS256")

    with pytest.raises(jwt.MissingRequiredClaimError):
        decode_access_token(token)


@pytest.mark.unit
def test_token_without_identity_is_rejected() -> None:
    token = jwt.encode({"iat": 0, "exp": 9999999999}, JWT_SECRET, algorithm="HS256")

    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(token)


@pytest.mark.unit
@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer abc", "abc"),
        ("  Bearer   abc  ", "abc"),
        ("Bearer", None),
        ("Basic abc", None),
        ("abc", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected) -> None:
    assert extract_bearer_token(header) == expected

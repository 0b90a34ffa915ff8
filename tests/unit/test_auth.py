from datetime import timedelta

import jwt
import pytest
from src.core.auth import Role, TokenError, create_access_token, decode_access_token
from src.core.config import get_settings


def test_create_and_decode_token_roundtrip() -> None:
    token = create_access_token("user-123", roles=[Role.STUDENT], email="user@example.com")

    payload = decode_access_token(token)

    assert payload["sub"] == "user-123"
    assert payload["roles"] == ["student"]
    assert payload["email"] == "user@example.com"


def test_create_token_rejects_unknown_role() -> None:
    with pytest.raises(TokenError):
        create_access_token("user-123", roles=["superuser"])


def test_decode_rejects_expired_token() -> None:
    token = create_access_token(
        "user-123", roles=[Role.ADMIN], expires_delta=timedelta(seconds=-10)
    )

    with pytest.raises(TokenError):
        decode_access_token(token)


def test_decode_rejects_role_outside_enum() -> None:
    settings = get_settings()
    token = jwt.encode(
        {"sub": "user-123", "roles": ["root"], "exp": 4102444800},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )

    with pytest.raises(TokenError):
        decode_access_token(token)

"""Bearer token helpers and the closed role enum."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta
from enum import Enum

import jwt
from src.core.config import get_settings


class TokenError(Exception):
    """Raised when a token cannot be decoded or validated."""


class Role(str, Enum):
    """Platform roles. A role reference row is identified by one of these names."""

    ADMIN = "admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"

    @classmethod
    def contains(cls, value: str) -> bool:
        return value in cls.values()

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(role.value for role in cls)


def create_access_token(
    subject: str,
    *,
    roles: Sequence[Role | str],
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """Generate a signed JWT carrying the subject's platform roles."""
    settings = get_settings()
    role_names = [role.value if isinstance(role, Role) else role for role in roles]

    unsupported = [name for name in role_names if name not in settings.allowed_roles]
    if unsupported:
        raise TokenError(f"Unsupported role(s): {', '.join(unsupported)}")

    issued_at = datetime.now(UTC)
    ttl = expires_delta or timedelta(seconds=settings.access_token_ttl_seconds)
    claims: dict[str, object] = {
        "sub": subject,
        "roles": role_names,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + ttl).timestamp()),
        "iss": settings.app_name,
    }
    if email:
        claims["email"] = email

    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode a JWT and reject it unless every role claim is a known role."""
    settings = get_settings()

    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "roles", "exp"]},
        )
    except jwt.PyJWTError as exc:  # pragma: no cover - third-party raises numerous subclasses
        raise TokenError("Invalid token") from exc

    _ensure_known_roles(claims.get("roles", []))
    return claims


def _ensure_known_roles(roles: Iterable[str]) -> None:
    for name in roles:
        if not Role.contains(name):
            raise TokenError(f"Unsupported role: {name}")

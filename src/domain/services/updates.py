"""Validation shared by every partial-update operation."""

from __future__ import annotations

from collections.abc import Collection, Mapping
from typing import Any

from src.core.auth import Role
from src.domain.errors import InvalidFieldError, InvalidRoleError, NoFieldsProvidedError


def validate_partial(
    partial: Mapping[str, Any] | None,
    allowed: Collection[str],
    *,
    aliases: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Return ``partial`` keyed by canonical field names.

    Raises ``NoFieldsProvidedError`` for an empty partial and
    ``InvalidFieldError`` naming every key outside ``allowed``, or when
    an alias and its canonical name are both supplied.
    """
    if not partial:
        raise NoFieldsProvidedError()

    aliases = aliases or {}
    invalid = [key for key in partial if aliases.get(key, key) not in allowed]
    if invalid:
        raise InvalidFieldError(f"Invalid fields provided: {', '.join(invalid)}")

    normalized: dict[str, Any] = {}
    for key, value in partial.items():
        field = aliases.get(key, key)
        if field in normalized:
            raise InvalidFieldError(f"Field {field} provided more than once")
        normalized[field] = value
    return normalized


def parse_role(value: Role | str) -> Role:
    try:
        return Role(value)
    except ValueError as exc:
        raise InvalidRoleError(
            f"Invalid role: {value}. Only {', '.join(Role.values())} are allowed."
        ) from exc

"""Role assignment lifecycle.

An assignment starts ``active`` and only changes through explicit status or
expiration writes. ``expires_at`` is advisory metadata: nothing here moves an
assignment out of ``active`` when it passes. Revocation deletes the row, so
there is no terminal status and a second revoke fails.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy.exc import IntegrityError
from src.core.auth import Role
from src.domain.errors import (
    AssignmentNotFoundError,
    DuplicateAssignmentError,
    InvalidFieldError,
    RoleNotFoundError,
    UserNotFoundError,
)
from src.domain.filters import RoleAssignmentFilters
from src.domain.models import AssignmentStatus, RoleAssignmentRecord
from src.domain.pagination import PageRequest, PaginatedResponse
from src.domain.services.updates import parse_role, validate_partial
from src.infrastructure.db.models import RoleAssignmentModel, RoleModel
from src.infrastructure.repositories.unit_of_work import UnitOfWork

logger = structlog.get_logger()

ASSIGNMENT_SORT_FIELDS = frozenset({"assigned_at", "expires_at", "status"})
DEFAULT_ASSIGNMENT_SORT = "assigned_at"

UPDATABLE_FIELDS = frozenset({"status", "expires_at"})
FIELD_ALIASES = {"expiresAt": "expires_at"}


class RoleAssignmentService:
    """Assign, update, revoke and list role assignments."""

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def assign(self, user_id: str, role: Role | str) -> str:
        """Give ``user_id`` the role and return the new assignment id."""
        role_name = parse_role(role)

        async with self.uow:
            role_row = await self._require_role(role_name)

            if not await self.uow.users.exists(user_id):
                raise UserNotFoundError(f"User with id {user_id} not found")

            existing = await self.uow.assignments.find(user_id=user_id, role_id=role_row.id)
            if existing is not None:
                raise DuplicateAssignmentError(f"User {user_id} already has role {role_name.value}")

            try:
                assignment = await self.uow.assignments.add(
                    user_id=user_id,
                    role_id=role_row.id,
                    assigned_at=datetime.now(UTC),
                )
            except IntegrityError as exc:
                # A concurrent assign won the unique (user_id, role_id) race
                raise DuplicateAssignmentError(
                    f"User {user_id} already has role {role_name.value}"
                ) from exc

        logger.info(
            "role_assigned",
            assignment_id=assignment.id,
            user_id=user_id,
            role=role_name.value,
        )
        return assignment.id

    async def update_by_user_and_role(
        self,
        user_id: str,
        role: Role | str,
        partial: Mapping[str, Any],
    ) -> RoleAssignmentRecord:
        values = self._coerce(partial)
        role_name = parse_role(role)

        async with self.uow:
            role_row = await self._require_role(role_name)
            assignment = await self.uow.assignments.find(user_id=user_id, role_id=role_row.id)
            if assignment is None:
                raise AssignmentNotFoundError(
                    f"Role assignation for user {user_id} and role {role_name.value} not found"
                )
            record = await self._apply(assignment, values)

        logger.info(
            "role_assignment_updated",
            assignment_id=record.id,
            user_id=user_id,
            role=role_name.value,
            updated_fields=sorted(values),
        )
        return record

    async def update_by_id(
        self, assignment_id: str, partial: Mapping[str, Any]
    ) -> RoleAssignmentRecord:
        values = self._coerce(partial)

        async with self.uow:
            assignment = await self.uow.assignments.get_model(assignment_id)
            if assignment is None:
                raise AssignmentNotFoundError(f"Role assignation with id {assignment_id} not found")
            record = await self._apply(assignment, values)

        logger.info(
            "role_assignment_updated",
            assignment_id=assignment_id,
            updated_fields=sorted(values),
        )
        return record

    async def revoke_by_user_and_role(self, user_id: str, role: Role | str) -> None:
        role_name = parse_role(role)

        async with self.uow:
            role_row = await self._require_role(role_name)
            assignment = await self.uow.assignments.find(user_id=user_id, role_id=role_row.id)
            if assignment is None:
                raise AssignmentNotFoundError(
                    f"Role assignation for user {user_id} and role {role_name.value} not found"
                )
            await self.uow.assignments.delete(assignment)

        logger.info("role_revoked", user_id=user_id, role=role_name.value)

    async def revoke_by_id(self, assignment_id: str) -> None:
        async with self.uow:
            assignment = await self.uow.assignments.get_model(assignment_id)
            if assignment is None:
                raise AssignmentNotFoundError(f"Role assignation with id {assignment_id} not found")
            await self.uow.assignments.delete(assignment)

        logger.info("role_revoked", assignment_id=assignment_id)

    async def list(
        self,
        request: PageRequest,
        filters: RoleAssignmentFilters | None = None,
    ) -> PaginatedResponse[RoleAssignmentRecord]:
        sort_field = request.resolve_sort(ASSIGNMENT_SORT_FIELDS, DEFAULT_ASSIGNMENT_SORT)

        async with self.uow:
            records, total = await self.uow.assignments.paginate(
                filters or RoleAssignmentFilters(), request, sort_field=sort_field
            )

        return PaginatedResponse.build(
            records,
            request=request,
            total=total,
            message="Role assignations retrieved successfully",
        )

    async def _require_role(self, role_name: Role) -> RoleModel:
        role_row = await self.uow.roles.get_by_name(role_name)
        if role_row is None:
            raise RoleNotFoundError(f"Role {role_name.value} not found in database")
        return role_row

    async def _apply(
        self, assignment: RoleAssignmentModel, values: dict[str, Any]
    ) -> RoleAssignmentRecord:
        await self.uow.assignments.apply(assignment, values)
        record = await self.uow.assignments.get(assignment.id)
        if record is None:  # pragma: no cover - row was just written in this transaction
            raise AssignmentNotFoundError(f"Role assignation with id {assignment.id} not found")
        return record

    @staticmethod
    def _coerce(partial: Mapping[str, Any]) -> dict[str, Any]:
        values = validate_partial(partial, UPDATABLE_FIELDS, aliases=FIELD_ALIASES)

        if "status" in values:
            try:
                values["status"] = AssignmentStatus(values["status"])
            except ValueError as exc:
                raise InvalidFieldError(f"Invalid status: {values['status']}") from exc

        if "expires_at" in values:
            expires_at = values["expires_at"]
            if isinstance(expires_at, str):
                try:
                    expires_at = datetime.fromisoformat(expires_at)
                except ValueError as exc:
                    raise InvalidFieldError(f"Invalid expires_at: {expires_at}") from exc
            if expires_at is not None and not isinstance(expires_at, datetime):
                raise InvalidFieldError(f"Invalid expires_at: {expires_at!r}")
            values["expires_at"] = expires_at

        return values

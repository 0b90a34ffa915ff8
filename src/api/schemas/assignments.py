from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from src.core.auth import Role
from src.domain.models import AssignmentStatus


class RoleAssignmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    role_id: str
    role_name: Role
    assigned_at: datetime
    expires_at: datetime | None = None
    status: AssignmentStatus
    user_email: str | None = None
    user_first_name: str | None = None
    user_last_name: str | None = None


class RoleAssignmentCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(..., min_length=1, max_length=36)
    role: str = Field(..., min_length=1, max_length=32)


class RoleAssignmentUpdate(BaseModel):
    """Partial update; only ``status`` and ``expiresAt`` are accepted by the service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    status: AssignmentStatus | None = None
    expires_at: datetime | None = None

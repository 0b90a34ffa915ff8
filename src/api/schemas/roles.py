from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from src.core.auth import Role


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Role
    description: str | None = None


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=32)
    description: str | None = None


class RoleUpdate(BaseModel):
    # Unknown keys are kept so the service can reject them by name
    model_config = ConfigDict(extra="allow")

    name: str | None = Field(None, min_length=1, max_length=32)
    description: str | None = None

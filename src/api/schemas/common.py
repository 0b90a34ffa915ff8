"""Response envelopes shared by every endpoint."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

DataT = TypeVar("DataT")


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class PaginationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")


class ApiResponse(BaseModel, Generic[DataT]):
    """``{success, message, data, timestamp}`` wrapper for single results."""

    model_config = ConfigDict(from_attributes=True)

    success: bool = True
    message: str = "Request successful"
    data: DataT | None = None
    timestamp: str = Field(default_factory=_now_iso)


class PaginatedEnvelope(BaseModel, Generic[DataT]):
    """List wrapper; identical for every resource."""

    model_config = ConfigDict(from_attributes=True)

    success: bool = True
    message: str
    data: list[DataT]
    timestamp: str
    pagination: PaginationSchema


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    kind: str
    timestamp: str = Field(default_factory=_now_iso)

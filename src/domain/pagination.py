"""Resource-agnostic pagination envelope shared by every list operation."""

from __future__ import annotations

import math
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, Literal, TypeVar

from src.domain.errors import InvalidPaginationError, InvalidSortFieldError

T = TypeVar("T")

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True, slots=True)
class PageRequest:
    """Page, size, sort key and direction requested by a caller."""

    page: int = 1
    size: int = 10
    sort: str | None = None
    order: SortOrder = "desc"

    def __post_init__(self) -> None:
        if self.page < 1:
            raise InvalidPaginationError(f"Page must be a positive integer, got {self.page}")
        if self.size < 1:
            raise InvalidPaginationError(f"Size must be a positive integer, got {self.size}")
        if self.order not in ("asc", "desc"):
            raise InvalidPaginationError(f"Order must be either asc or desc, got {self.order}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def descending(self) -> bool:
        return self.order == "desc"

    def resolve_sort(self, allowed: Collection[str], default: str) -> str:
        """Return the requested sort key, or ``default`` when none was given.

        Unknown keys fail fast instead of falling back, so the ordering a
        client observes is always the ordering it asked for.
        """
        sort_field = self.sort or default
        if sort_field not in allowed:
            raise InvalidSortFieldError(
                f"Invalid sort field: {sort_field}. Allowed: {', '.join(sorted(allowed))}"
            )
        return sort_field


@dataclass(frozen=True, slots=True)
class PaginationMeta:
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

    @classmethod
    def compute(cls, *, page: int, size: int, total: int) -> PaginationMeta:
        total_pages = math.ceil(total / size) if total > 0 else 0
        return cls(
            page=page,
            limit=size,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


@dataclass(slots=True)
class PaginatedResponse(Generic[T]):
    data: list[T]
    pagination: PaginationMeta
    message: str = "Request successful"
    success: bool = True
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    @classmethod
    def build(
        cls,
        items: Sequence[T],
        *,
        request: PageRequest,
        total: int,
        message: str,
    ) -> PaginatedResponse[T]:
        return cls(
            data=list(items),
            pagination=PaginationMeta.compute(page=request.page, size=request.size, total=total),
            message=message,
        )

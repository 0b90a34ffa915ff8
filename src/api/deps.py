from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterable, Sequence
from typing import Literal

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession
from src.core.auth import Role, TokenError, decode_access_token
from src.core.config import get_settings
from src.domain import User
from src.domain.errors import InvalidPaginationError
from src.domain.pagination import PageRequest
from src.domain.services import (
    InstructorService,
    ReviewService,
    RoleAssignmentService,
    RoleService,
)
from src.infrastructure.db.session import get_session
from src.infrastructure.repositories import UnitOfWork

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    """Resolve the authenticated user from a bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    user_id = payload.get("sub")
    roles: Iterable[str] = payload.get("roles", [])

    if not user_id:
        raise _unauthorized("Token missing subject")

    if not roles:
        raise _forbidden("Token missing required roles")

    return User(user_id=user_id, email=payload.get("email", ""), roles=list(roles))


def require_roles(required_roles: Sequence[Role | str]) -> Callable[[User], User]:
    """Dependency factory enforcing that the authenticated user has one of the required roles."""
    settings = get_settings()
    allowed = set(settings.allowed_roles)

    names = [role.value if isinstance(role, Role) else role for role in required_roles]
    invalid_roles = [name for name in names if name not in allowed]
    if invalid_roles:
        joined_roles = ", ".join(invalid_roles)
        raise ValueError(f"Unsupported role(s) requested: {joined_roles}")

    required = set(names)

    def dependency(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if not required.intersection(user.roles):
            raise _forbidden("Insufficient role privileges")
        return user

    return dependency


def ensure_self_or_admin(user: User, user_id: str) -> None:
    """Reject callers acting on another user's resources unless they are admins."""
    if user.user_id != user_id and not user.is_admin:
        raise _forbidden("Cannot act on behalf of another user")


def get_page_request(
    page: int = Query(1, ge=1),
    size: int | None = Query(None, ge=1),
    sort: str | None = Query(None, min_length=1, max_length=64),
    order: Literal["asc", "desc"] | None = Query(None),
) -> PageRequest:
    """Build a PageRequest from query parameters, applying configured defaults."""
    settings = get_settings()
    page_size = size or settings.default_page_size
    if page_size > settings.max_page_size:
        raise InvalidPaginationError(
            f"Size must not exceed {settings.max_page_size}, got {page_size}"
        )
    return PageRequest(
        page=page,
        size=page_size,
        sort=sort,
        order=order or settings.default_sort_order,
    )


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def get_uow(session: AsyncSession = Depends(get_db_session)) -> UnitOfWork:  # noqa: B008
    return UnitOfWork(session)


def get_role_service(uow: UnitOfWork = Depends(get_uow)) -> RoleService:  # noqa: B008
    return RoleService(uow)


def get_assignment_service(
    uow: UnitOfWork = Depends(get_uow),  # noqa: B008
) -> RoleAssignmentService:
    return RoleAssignmentService(uow)


def get_instructor_service(uow: UnitOfWork = Depends(get_uow)) -> InstructorService:  # noqa: B008
    return InstructorService(uow)


def get_review_service(uow: UnitOfWork = Depends(get_uow)) -> ReviewService:  # noqa: B008
    return ReviewService(uow)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

from __future__ import annotations

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from .instructors import InstructorRepository
from .reviews import ReviewRepository
from .role_assignments import RoleAssignmentRepository
from .roles import RoleRepository
from .users import UserRepository

logger = structlog.get_logger()


class UnitOfWork:
    """One transaction over the request's session.

    Every write made inside ``async with uow:`` is committed together on a
    clean exit and rolled back together if anything raises.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.users = UserRepository(session)
        self.roles = RoleRepository(session)
        self.assignments = RoleAssignmentRepository(session)
        self.instructors = InstructorRepository(session)
        self.reviews = ReviewRepository(session)

    async def __aenter__(self) -> UnitOfWork:
        logger.debug("uow_enter")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc:
            await self.rollback()
        else:
            await self.commit()
        logger.debug("uow_exit", exc_type=str(exc_type) if exc_type else None)

    async def commit(self) -> None:
        await self.session.commit()
        logger.debug("uow_commit")

    async def rollback(self) -> None:
        await self.session.rollback()
        logger.debug("uow_rollback")

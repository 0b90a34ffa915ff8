from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from src.infrastructure.db.models import UserModel


class UserRepository:
    """Read-only access to user rows; user CRUD lives elsewhere."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def exists(self, user_id: str) -> bool:
        stmt = select(UserModel.id).where(UserModel.id == user_id).limit(1)
        return await self.session.scalar(stmt) is not None

    async def get(self, user_id: str) -> UserModel | None:
        return await self.session.get(UserModel, user_id)

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from src.api.deps import get_db_session
from src.api.main import app
from src.core.auth import Role, create_access_token
from src.domain.models import VerificationStatus
from src.domain.reference_data import ROLE_DEFINITIONS
from src.infrastructure.db.base import Base
from src.infrastructure.db.models import InstructorModel, RoleModel, UserModel
from src.infrastructure.repositories import UnitOfWork

from tests.utils import (
    ADMIN_ID,
    INSTRUCTOR_ID,
    OTHER_STUDENT_ID,
    PENDING_INSTRUCTOR_ID,
    STUDENT_ID,
)

SEED_USERS = [
    (ADMIN_ID, "admin@example.com", "Ada", "Admin"),
    (STUDENT_ID, "student@example.com", "Sam", "Student"),
    (INSTRUCTOR_ID, "instructor@example.com", "Ines", "Instructor"),
    (OTHER_STUDENT_ID, "other@example.com", "Otto", "Other"),
    (PENDING_INSTRUCTOR_ID, "pending@example.com", "Pia", "Pending"),
]


@pytest.fixture()
async def engine() -> AsyncIterator[AsyncEngine]:
    # One shared connection so every session sees the same in-memory database
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection: Any, _: Any) -> None:
        # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    factory = async_sessionmaker(engine, expire_on_commit=False)
    async with factory() as session:
        await seed_reference_data(session)
    return factory


async def seed_reference_data(session: AsyncSession) -> None:
    for role in ROLE_DEFINITIONS:
        session.add(RoleModel(**role))

    birth_date = datetime(1990, 1, 1, tzinfo=UTC)
    for user_id, email, first_name, last_name in SEED_USERS:
        session.add(
            UserModel(
                id=user_id,
                email=email,
                first_name=first_name,
                last_name=last_name,
                birth_date=birth_date,
            )
        )
    await session.flush()

    session.add(
        InstructorModel(
            id=INSTRUCTOR_ID,
            total_students=120,
            total_courses=4,
            total_reviews=35,
            average_rating=4.5,
            verification_status=VerificationStatus.VERIFIED,
            verified_at=datetime(2025, 6, 1, tzinfo=UTC),
        )
    )
    session.add(
        InstructorModel(
            id=PENDING_INSTRUCTOR_ID,
            total_students=3,
            total_courses=1,
            total_reviews=0,
            average_rating=0,
            verification_status=VerificationStatus.PENDING,
        )
    )
    await session.commit()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def uow(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[UnitOfWork]:
    async with session_factory() as session:
        yield UnitOfWork(session)


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the seeded in-memory database."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


@pytest.fixture()
def admin_token() -> str:
    return create_access_token(ADMIN_ID, roles=[Role.ADMIN])


@pytest.fixture()
def student_token() -> str:
    return create_access_token(STUDENT_ID, roles=[Role.STUDENT])

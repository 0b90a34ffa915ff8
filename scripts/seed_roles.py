#!/usr/bin/env python3
"""Seed the roles reference table with admin, instructor and student.

Existing roles are left untouched, so the script is safe to re-run.

Run with:
    python scripts/seed_roles.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio

import structlog
from src.core.config import get_settings
from src.core.logging import setup_logging
from src.domain.reference_data import ROLE_DEFINITIONS
from src.infrastructure.db.session import dispose_engine, get_session_factory
from src.infrastructure.repositories import UnitOfWork

logger = structlog.get_logger()


async def seed_roles() -> int:
    created = 0
    session_factory = get_session_factory()

    async with session_factory() as session:
        uow = UnitOfWork(session)
        async with uow:
            for definition in ROLE_DEFINITIONS:
                if await uow.roles.get_by_name(definition["name"]) is not None:
                    logger.info("role_seed_skipped", role=definition["name"].value)
                    continue
                await uow.roles.add(definition["name"], definition["description"])
                created += 1
                logger.info("role_seeded", role=definition["name"].value)

    await dispose_engine()
    return created


def main() -> None:
    setup_logging(get_settings().log_level)
    created = asyncio.run(seed_roles())
    print(f"Seeded {created} role(s)")


if __name__ == "__main__":
    main()

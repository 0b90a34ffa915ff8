from __future__ import annotations

import time
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from src.core.config import get_settings
from src.infrastructure.db.session import get_session_factory

router = APIRouter(tags=["Observability"])
logger = structlog.get_logger()

_started_at = time.monotonic()


async def check_postgres() -> dict:
    """Check database connection."""
    try:
        session_factory = get_session_factory()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            return {"status": "ok"}
    except (SQLAlchemyError, OSError) as e:
        return {"status": "error", "message": str(e)[:100]}


@router.get("/health", summary="Service health check")
async def health_check() -> dict:
    """Return basic service and datastore status information."""
    settings = get_settings()

    postgres_status = await check_postgres()
    overall_status = "ok" if postgres_status.get("status") == "ok" else "degraded"

    payload = {
        "service": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "status": overall_status,
        "uptime_seconds": round(time.monotonic() - _started_at, 3),
        "timestamp": datetime.now(UTC).isoformat(),
        "datastores": {
            "postgres": postgres_status,
        },
    }
    logger.info("health_checked", **payload)
    return payload

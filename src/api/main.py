from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from src.api.errors import register_exception_handlers
from src.api.routes import register_routes
from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.infrastructure.db.session import dispose_engine
from starlette.responses import Response
from structlog.contextvars import bind_contextvars, clear_contextvars

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


async def request_context_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Bind request id, path and method to every log event of the request."""
    request_id = request.headers.get(REQUEST_ID_HEADER, str(uuid4()))
    bind_contextvars(request_id=request_id, path=request.url.path, method=request.method)
    try:
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
    finally:
        clear_contextvars()


def _allowed_origins(settings: Settings) -> list[str]:
    # Any origin while developing locally
    if settings.environment in ("local", "development"):
        return ["*"]
    return list(settings.cors_origins)


def create_app() -> FastAPI:
    """Application factory for the user service API."""
    settings = get_settings()
    setup_logging(settings.log_level, service=settings.app_name, environment=settings.environment)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("service_startup", version=settings.version, api_prefix=settings.api_prefix)
        yield
        await dispose_engine()
        logger.info("service_shutdown")

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(settings),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_context_middleware)

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()

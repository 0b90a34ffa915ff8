"""Translate domain errors into the JSON error envelope."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from src.api.schemas.common import ErrorResponse
from src.domain.errors import (
    ConflictError,
    DomainError,
    InvalidRequestError,
    NotFoundError,
)

logger = structlog.get_logger()

STATUS_BY_FAMILY: tuple[tuple[type[DomainError], int], ...] = (
    (InvalidRequestError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def status_for(exc: DomainError) -> int:
    for family, status_code in STATUS_BY_FAMILY:
        if isinstance(exc, family):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log("domain_error", kind=exc.kind, error=exc.message, status_code=status_code)

    body = ErrorResponse(error=exc.message, kind=exc.kind)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]

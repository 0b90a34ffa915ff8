"""structlog setup shared by the API process and the maintenance scripts."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog
from structlog.types import EventDict, WrappedLogger

_CONFIGURED = False

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _static_fields(fields: Mapping[str, Any]):
    def processor(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        for key, value in fields.items():
            event_dict.setdefault(key, value)
        return event_dict

    return processor


def setup_logging(level: int | str = logging.INFO, **static_fields: Any) -> None:
    """Configure structlog to emit one JSON object per event.

    ``static_fields`` (for example ``service`` and ``environment``) are added
    to every event. Request-scoped keys come from ``structlog.contextvars``.
    Calling this more than once is a no-op.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    log_level = _resolve_level(level)
    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stdout)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        _static_fields(static_fields),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        structlog.processors.dict_tracebacks,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True

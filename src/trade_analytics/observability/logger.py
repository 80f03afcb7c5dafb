"""Structured logging with evaluation_id support.

Uses structlog for structured logging with JSON or console output.
Every log entry carries the evaluation_id of the filter/metrics run
that produced it, so one dashboard refresh can be followed end to end.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

_evaluation_id: ContextVar[str] = ContextVar("evaluation_id", default="")


def get_evaluation_id() -> str:
    """Current evaluation id, or "" outside an evaluation."""
    return _evaluation_id.get()


def new_evaluation_id() -> str:
    """Generate and set a new evaluation id."""
    eid = uuid.uuid4().hex[:12]
    _evaluation_id.set(eid)
    return eid


def _add_evaluation_id(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: add evaluation_id when one is set."""
    eid = get_evaluation_id()
    if eid:
        event_dict.setdefault("evaluation_id", eid)
    return event_dict


def setup_logging(
    level: str = "INFO",
    format: str = "json",
) -> None:
    """Configure structured logging for applications embedding the engine.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        format: "json" for production, "console" for development.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        _add_evaluation_id,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for a module."""
    return structlog.get_logger(name)

"""Structured logging for the binder rules engine.

Modules log key-value events through structlog. ``configure_logging``
picks the level and renderer from the application settings unless told
otherwise; ``record_context`` tags everything logged while a single
character record is being processed.

Example:
    >>> from binder_engine.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.info("Migrating legacy character", name="Thorin")
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from binder_engine.core.config import get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


APP_NAME = "binder_engine"
STDLIB_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every entry with the package name."""
    event_dict["app"] = APP_NAME
    return event_dict


def _renderer(json_format: bool) -> list[Processor]:
    if json_format:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [
        structlog.dev.ConsoleRenderer(
            colors=sys.stdout.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )
    ]


def configure_logging(
    *,
    level: str | None = None,
    json_format: bool | None = None,
    log_file: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        level: Logging level name. Defaults to ``Settings.log_level``.
        json_format: Emit JSON lines. Defaults to ``Settings.json_logs``.
        log_file: Optional file that also receives standard library records.

    Example:
        >>> configure_logging(level="DEBUG", json_format=True)
    """
    if level is None or json_format is None:
        settings = get_settings()
        level = level or settings.log_level
        json_format = settings.json_logs if json_format is None else json_format

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
        structlog.processors.StackInfoRenderer(),
        *_renderer(json_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(format=STDLIB_FORMAT, level=numeric_level, handlers=handlers, force=True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structlog logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key-values to every subsequent log entry in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Drop all bound context variables."""
    structlog.contextvars.clear_contextvars()


@contextmanager
def record_context(record_id: str) -> Iterator[None]:
    """Tag log entries with ``record_id`` for the duration of the block.

    Only the ``record_id`` key is removed on exit; other bound context
    is left alone.
    """
    with structlog.contextvars.bound_contextvars(record_id=record_id):
        yield


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "record_context",
]

"""
crab-core logging - structured logging on top of structlog.

Manifesto:
    The value types in crab-core are silent on their happy paths. The only
    events worth recording are panics (always, at ``critical``) and buffer
    reallocation (``debug``, for diagnosing memory behaviour). Both go
    through structlog so an embedding application controls the format in
    one place.

    - **One chain:** Every crab logger renders through the same processors
    - **Named records:** Each record carries the emitting module as ``logger``
    - **Panics stay panics:** Nothing in the chain may raise while a panic
      is being reported

Architecture:
    ::

        configure_logging(level="WARNING", json_format=None, service="crab")
            │
            ▼
        structlog processor chain:
          1. TimeStamper (iso)
          2. merge_contextvars      (context bound by the application)
          3. add_log_level
          4. StackInfoRenderer / set_exc_info
          5. add_service_metadata
          6. JSONRenderer (or ConsoleRenderer for a tty)
            │
            ▼
        PrintLogger(stderr)

        get_logger("crab.core.panic")
            └── lazy proxy, initial context {"logger": "crab.core.panic"}

Examples:
    >>> from crab.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=True, service="my-app")
    >>> logger = get_logger(__name__)
    >>> logger.debug("string_reallocate", old_capacity=0, new_capacity=16)

Guardrails:
    ❌ DON'T: Add ``structlog.stdlib.add_logger_name`` to the chain
    ✅ DO: Name loggers through ``get_logger(name)``; PrintLogger has no
      ``name`` attribute

    ❌ DON'T: Call configure_logging() from library modules
    ✅ DO: Leave it to the application, or use configure_from_settings()

Tags:
    logging, structlog, observability, json-logging, crab-core
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "crab"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "WARNING",
    json_format: bool | None = None,
    service: str = "crab",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for crab-core records.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]
    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    # Loggers are not cached so that reconfiguring (tests, applications that
    # configure after import) reaches module-level loggers.
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_from_settings() -> None:
    """Configure logging from :class:`~crab.core.settings.CrabSettings`."""
    from crab.core.settings import get_settings

    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger whose records carry ``logger=name``."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger=name)


__all__ = [
    "configure_logging",
    "configure_from_settings",
    "get_logger",
]

"""
Estimator Logging - structured logging for the CLI and MCP server.

Manifesto:
    Every component logs snake_case events with key/value fields
    (``snapshot_saved``, ``role_deleted``, ``estimate_calculated``) through
    structlog, so the same call reads well on a developer console and
    aggregates cleanly as JSON.

    - **Structures:** key/value events, JSON for aggregation
    - **Correlates:** request_id / caller bound through contextvars
    - **Stays off stdout:** the MCP stdio transport owns stdout, so all log
      output goes to stderr

Architecture:
    ::

        configure_logging(level="INFO", json_format=False, service="estimator")
              │
              ▼
        structlog processor chain:
          1. filter_by_level / merge_contextvars
          2. add_log_level / add_logger_name
          3. TimeStamper (ISO, UTC)
          4. add_service_metadata
          5. JSONRenderer or ConsoleRenderer  ──►  stdlib logging  ──►  stderr

Examples:
    >>> from estimator.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", service="estimator-mcp")
    >>> logger = get_logger(__name__)
    >>> logger.info("catalog_loaded", roles=4, entries=31)

Tags:
    logging, structlog, observability, json-logging

Doc-Types:
    - API Reference
    - Configuration Documentation
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Store service name for metadata
_SERVICE_NAME = "estimator"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "estimator",
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if
            stderr is not a tty)
        service: Service name to include in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    level_num = getattr(logging, level.upper(), logging.INFO)

    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        _add_service_metadata,
    ]

    if json_format:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.set_exc_info)
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Third-party libraries (mcp, httpx) log through the same handler
    logging.basicConfig(
        format="%(message)s",
        handlers=[_StderrHandler()],
        level=level_num,
        force=True,
    )


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self) -> Any:
        return sys.stderr

    @stream.setter
    def stream(self, value: Any) -> None:
        pass


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger.

    Args:
        name: Logger name (usually __name__)
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs.

    Example:
        bind_context(request_id="abc123", caller="mcp")
        logger.info("estimate_calculated")  # Includes request_id and caller
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(request_id=ctx.request_id, caller="cli"):
            logger.info("role_saved")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args: Any) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "unbind_context",
    "LogContext",
]

"""Structured logging for floe-mock.

This module provides:
- get_logger: structlog logger for the package
- configure_logging: processor chain for the CLI or an embedding service
- timed: Context manager logging how long a block took

The generator only emits events. Where they go is decided by whoever calls
configure_logging (the CLI does so for --verbose).
"""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from structlog.stdlib import BoundLogger

LOGGER_NAME = "floe.mock"


def get_logger(name: str | None = None) -> BoundLogger:
    """Get a structlog logger.

    Args:
        name: Logger name (default: the package logger, "floe.mock").

    Example:
        >>> get_logger().info("mock_served", path="/pets", status=200)
    """
    return structlog.get_logger(name or LOGGER_NAME)


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = True,
    add_timestamp: bool = True,
) -> None:
    """Route structlog events through stdlib logging on stderr.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of the console format.
        add_timestamp: Prefix events with an ISO timestamp.

    Raises:
        ValueError: If log_level is not a stdlib level name.

    Example:
        >>> configure_logging(log_level="DEBUG", json_format=False)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        msg = f"Unknown log level: {log_level}"
        raise ValueError(msg)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer(),
    ]
    if add_timestamp:
        processors.insert(1, structlog.processors.TimeStamper(fmt="iso"))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    # stdout carries generated instances
    logging.basicConfig(format="%(message)s", level=level, stream=sys.stderr, force=True)


@contextmanager
def timed(event: str, *, logger: Any = None, **fields: Any) -> Iterator[dict[str, Any]]:
    """Log `event` at debug level with the block's duration in milliseconds.

    The yielded dict is logged with the event, so the block can add fields
    (an outcome, a count) before it exits.

    Example:
        >>> with timed("schema_loaded", path="pet.json") as fields:
        ...     fields["properties"] = 8
    """
    log = logger or get_logger()
    start = time.perf_counter()
    try:
        yield fields
    finally:
        duration_ms = round((time.perf_counter() - start) * 1000, 3)
        log.debug(event, duration_ms=duration_ms, **fields)

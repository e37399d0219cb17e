"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog,
with JSON output for production and human-readable console output for
development. Request-scoped values bound with
``structlog.contextvars.bind_contextvars`` (the correlation id, for example)
are merged into every event.
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Args:
        log_level: Minimum level emitted by the standard library root logger.
        json_logs: Render events as JSON lines instead of coloured console output.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_secret(value: str | None, visible: int = 8) -> str:
    """Return a log-safe prefix of a token or identifier."""
    if not value:
        return "<empty>"
    return value[:visible] + "..."


# Create a singleton logger instance for the application
logger = structlog.get_logger()

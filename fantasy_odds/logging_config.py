"""
Structured logging configuration.

Uses structlog for JSON-formatted logs suitable for log aggregation systems.
Logs go to stderr so the CLI can keep stdout for market JSON.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "fantasy-odds",
) -> None:
    """
    Configure structured logging for the engine.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON format. If False, pretty console format (dev)
        service_name: Service name for log context
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        shared_processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ])
    else:
        shared_processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(colors=True),
        ])

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    context: dict[str, Any] | None = None,
) -> None:
    """Log error with full context."""
    logger.error(
        "error_occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        exc_info=True,
        **(context or {}),
    )


def log_market(
    logger: structlog.BoundLogger,
    seed_key: str,
    team1: str,
    team2: str,
    spread: float,
    basis: str,
    **kwargs: Any,
) -> None:
    """Log generation of a betting market."""
    logger.debug(
        "market_generated",
        seed_key=seed_key,
        team1=team1,
        team2=team2,
        spread=spread,
        basis=basis,
        **kwargs,
    )

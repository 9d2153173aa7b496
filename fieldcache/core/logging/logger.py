"""
Structured Logging Module using structlog

This module provides structured logging with:
- Worker ID correlation across concurrent pipeline workers
- Stage numbering for per-record execution flow
- JSON formatting for log aggregation
- Context processors for automatic field injection

Architectural Decision: structlog for production logging
- Context-aware logging with automatic field injection
- JSON output for log aggregation (ELK, Splunk, etc.)
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

import structlog
from structlog.types import EventDict, WrappedLogger

from fieldcache.core.config.settings import get_settings

# Context variable for worker ID (each worker thread has its own context)
worker_id_ctx: ContextVar[str | None] = ContextVar("worker_id", default=None)


def add_worker_id(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Add worker ID to log event from context variable.

    This processor adds the worker ID bound by the current worker thread to
    every log entry, so interleaved output from concurrent workers can be
    told apart.
    """
    worker_id = worker_id_ctx.get()
    if worker_id:
        event_dict["worker_id"] = worker_id
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add ISO timestamp to log event."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def add_log_level_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add log level name to event dict."""
    if "level" in event_dict:
        event_dict["level"] = event_dict["level"].upper()
    return event_dict


def setup_logging(log_level: str | None = None, log_format: str | None = None) -> None:
    """
    Setup structured logging with structlog.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format ('json' or 'console')
    """
    settings = get_settings()

    # Use settings if not provided
    log_level = log_level or settings.logging.LOG_LEVEL
    log_format = log_format or settings.logging.LOG_FORMAT

    # Configure standard library logging
    logging.basicConfig(
        format="%(message)s", stream=sys.stdout, level=getattr(logging, log_level.upper())
    )

    # Choose renderer based on format
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # Merge context variables
            add_worker_id,  # Add worker ID from context
            add_timestamp,  # Add ISO timestamp
            structlog.stdlib.add_log_level,  # Add log level
            add_log_level_name,  # Convert log level to uppercase
            structlog.stdlib.PositionalArgumentsFormatter(),  # Format positional args
            structlog.processors.StackInfoRenderer(),  # Render stack info
            structlog.processors.format_exc_info,  # Format exception info
            renderer,  # JSON or console renderer
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("message", key="value", stage="1.0")
    """
    return structlog.get_logger(name)


def is_debug_enabled() -> bool:
    """Whether the stdlib root logger would emit DEBUG records."""
    return logging.getLogger().isEnabledFor(logging.DEBUG)


def set_worker_id(worker_id: str) -> None:
    """
    Set worker ID in context for the current worker thread.

    Should be called once at the start of each worker loop.
    """
    worker_id_ctx.set(worker_id)


def get_worker_id() -> str | None:
    """Get current worker ID from context."""
    return worker_id_ctx.get()


def clear_worker_id() -> None:
    """Clear worker ID from context."""
    worker_id_ctx.set(None)


# Convenience function for logging with stage information
def log_stage(
    logger: structlog.stdlib.BoundLogger, stage: str, message: str, level: str = "info", **kwargs
) -> None:
    """
    Log a message with stage information.

    Args:
        logger: Logger instance
        stage: Stage identifier (e.g., Stage.CACHE_GET)
        message: Log message
        level: Log level (debug, info, warning, error, critical)
        **kwargs: Additional fields to log

    Usage:
        log_stage(logger, Stage.LOCAL_CACHE_LOOKUP, "cache:get hit", key="user:42")
    """
    log_func = getattr(logger, level.lower())
    log_func(message, stage=str(getattr(stage, "value", stage)), **kwargs)

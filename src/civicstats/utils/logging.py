"""Structured logging configuration using structlog."""

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from civicstats.config.settings import LoggingConfig


def render_enums(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Replace enum values (e.g. dataset kinds) with their plain values."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def _processors(json_output: bool) -> list[Processor]:
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        render_enums,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        return [
            *shared,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [*shared, structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(config: LoggingConfig | None = None) -> None:
    """
    Configure structured logging for the engine.

    Logs go to stderr so that command output on stdout stays clean.
    Calling this again replaces the previous configuration.

    Args:
        config: Level and renderer selection (defaults apply if omitted).
            ``json_output`` selects JSON lines for log aggregation over
            the human-readable console renderer.
    """
    config = config or LoggingConfig()
    log_level = logging.getLevelName(config.level)

    structlog.configure(
        processors=_processors(config.json_output),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Lazily configured structlog logger.
    """
    return structlog.get_logger(name)


def log_context(**kwargs: Any) -> Any:
    """
    Bind context to every log line emitted within a block.

    Example:
        with log_context(source="vehicle"):
            log.info("Fetching")  # includes source=vehicle

    Args:
        **kwargs: Key-value pairs to add to log context.

    Returns:
        Context manager that binds the values.
    """
    return structlog.contextvars.bound_contextvars(**kwargs)

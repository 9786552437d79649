"""Structured logging configuration.

Library modules log through `get_logger(__name__)` and only emit
debug events (graph resolved, unit initialized, file read). Applications and
the CLI decide where those events go by calling configure_logging().

Levels, besides the standard ones:
- VERBOSE (15): per-unit detail
- TRACE (5): everything
"""

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import structlog

# Context variables merged into every event
_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_LEVELS = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class LogContext:
    """
    Context manager for adding context to logs.

    Usage:
        with LogContext(build="app.js"):
            namespace.resolve()
    """

    def __init__(self, **kwargs: Any) -> None:
        self.new_context = kwargs
        self.token = None

    def __enter__(self) -> "LogContext":
        """Enter context and merge new values."""
        current = _log_context.get().copy()
        current.update(self.new_context)
        self.token = _log_context.set(current)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit context and restore previous values."""
        if self.token:
            _log_context.reset(self.token)


def _context_processor(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor injecting the LogContext values."""
    context = _log_context.get()
    if context:
        event_dict.update(context)
    return event_dict


def get_logger(name: str) -> Any:
    """
    Get a structlog logger backed by the stdlib logger `name`.

    Events are filtered by stdlib logging, so debug events are dropped until
    configure_logging() installs handlers and a level.

    Args:
        name: Logger name, usually the module `__name__`

    Returns:
        Lazily configured structlog BoundLogger
    """
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


def get_log_level(level: str) -> int:
    """
    Get numeric log level from string.

    Args:
        level: Level name (TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Numeric log level, INFO for unknown names
    """
    return LOG_LEVELS.get(level.upper(), logging.INFO)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    log_file: str | Path | None = None,
) -> None:
    """
    Configure structured logging.

    Args:
        level: Logging level (TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to output logs in JSON format
        log_file: Optional path to also write logs to
    """
    log_level = get_log_level(level)

    # Logs go to stderr so build output on stdout stays clean
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        file_path = Path(log_file)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(file_path))

    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True,
    )
    logging.getLogger().setLevel(log_level)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _context_processor,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

"""Observability - structured logging."""

from .logger import LogContext, configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
]

"""Logging infrastructure.

Console and silent adapters for ``LoggerPort``.
"""

from .console_logger import ConsoleLogger, LogContext, LogLevel
from .null_logger import NullLogger

__all__ = [
    "ConsoleLogger",
    "LogContext",
    "LogLevel",
    "NullLogger",
]

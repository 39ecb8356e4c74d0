"""
Logger module for nova

This module provides a small structured logging interface so components can
take any logger implementation that accepts keyword context.

Usage:
    from nova.logger import Logger, ConsoleLogger

    logger = ConsoleLogger()
    logger.info("Turn settled", correlation_id=cid, steps=3)

    # Or implement your own
    class MyCustomLogger(Logger):
        def info(self, message: str, **kwargs):
            ...
"""

import logging
import os

from .base import Logger
from .console_logger import ConsoleLogger


def _level_from_env() -> int:
    name = os.environ.get("NOVA_LOG_LEVEL", "INFO").upper()
    return getattr(logging, name, logging.INFO)


# Shared logger instance for modules that just need basic console logging
session_logger: ConsoleLogger = ConsoleLogger(level=_level_from_env())

__all__ = [
    "Logger",
    "ConsoleLogger",
    "session_logger",
]

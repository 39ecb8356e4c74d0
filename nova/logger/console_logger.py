"""Console logger built on the standard logging module."""

import logging
import sys
from typing import Any

from .base import Logger

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ConsoleLogger(Logger):
    """Writes `message key=value ...` lines to stderr."""

    def __init__(self, name: str = "nova", level: int = logging.INFO):
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)
        if not self._logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter(_FORMAT))
            self._logger.addHandler(handler)
        self._logger.propagate = False

    @staticmethod
    def _render(message: str, kwargs: dict) -> str:
        if not kwargs:
            return message
        context = " ".join(f"{key}={value}" for key, value in kwargs.items())
        return f"{message} {context}"

    def _log(self, level: int, message: str, kwargs: dict) -> None:
        self._logger.log(level, self._render(message, kwargs))

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def critical(self, message: str, **kwargs: Any) -> None:
        self._log(logging.CRITICAL, message, kwargs)

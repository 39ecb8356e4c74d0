"""Abstract logger interface for nova.

Loggers take a plain message plus keyword context. Context values are
rendered by the concrete implementation; callers never pre-format them.
"""

from abc import ABC, abstractmethod
from typing import Any


class Logger(ABC):
    """Structured logger interface."""

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error message."""

    @abstractmethod
    def critical(self, message: str, **kwargs: Any) -> None:
        """Log a critical message."""

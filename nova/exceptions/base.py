"""Base exception classes for the nova service.

Every error carries a machine-readable code, a human message and a details
dict so the HTTP layer can render it without inspecting the type further.
"""

from typing import Any, Dict, Optional


class NovaError(Exception):
    """Root of all nova errors."""

    default_code = "NOVA_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}

    def __str__(self) -> str:
        return self.message


class ValidationError(NovaError):
    """Caller supplied an empty message, a missing id or a malformed body."""

    default_code = "VALIDATION_ERROR"


class ConfigurationError(NovaError):
    """Required server-side configuration (usually a credential) is missing."""

    default_code = "CONFIGURATION_ERROR"


__all__ = [
    "NovaError",
    "ValidationError",
    "ConfigurationError",
]

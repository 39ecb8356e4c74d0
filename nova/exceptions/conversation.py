"""Conversation-related exceptions."""

from typing import Any, Dict, Optional

from nova.exceptions.base import NovaError


class InvalidTurnStateError(NovaError):
    """Raised when a turn transition is not allowed from the current state."""

    default_code = "INVALID_TURN_STATE"

    def __init__(self, current: str, target: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Cannot move turn from '{current}' to '{target}'",
            details=details or {"current": current, "target": target},
        )
        self.current = current
        self.target = target

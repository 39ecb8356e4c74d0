"""Custom exceptions for the nova assistant proxy.

Validation and configuration errors are raised before any network call.
Upstream errors keep enough detail for diagnostics while the chat UI only
ever shows a generic apology.
"""

from nova.exceptions.base import (
    NovaError,
    ValidationError,
    ConfigurationError,
)
from nova.exceptions.upstream import (
    UpstreamError,
    UpstreamRejectionError,
    TransportFailureError,
)
from nova.exceptions.conversation import InvalidTurnStateError

__all__ = [
    "NovaError",
    "ValidationError",
    "ConfigurationError",
    "UpstreamError",
    "UpstreamRejectionError",
    "TransportFailureError",
    "InvalidTurnStateError",
]

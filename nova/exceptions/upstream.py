"""Upstream-related exceptions."""

from typing import Any, Dict, Optional

from nova.exceptions.base import NovaError


class UpstreamError(NovaError):
    """Base exception for failures talking to an upstream service."""

    default_code = "UPSTREAM_ERROR"


class UpstreamRejectionError(UpstreamError):
    """Raised when an upstream service answers with a non-2xx status.

    The status and body are kept verbatim so they can be passed through.
    """

    default_code = "UPSTREAM_REJECTED"

    def __init__(
        self,
        status_code: int,
        body: str,
        service: str = "upstream",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=f"{service} responded with HTTP {status_code}",
            details=details or {"status_code": status_code},
        )
        self.status_code = status_code
        self.body = body
        self.service = service


class TransportFailureError(UpstreamError):
    """Raised when no response was received at all."""

    default_code = "TRANSPORT_FAILURE"

    def __init__(self, message: str, service: str = "upstream"):
        super().__init__(message=message, details={"service": service})
        self.service = service

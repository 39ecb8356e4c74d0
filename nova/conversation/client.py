"""HTTP client for the nova web endpoints, as used by the conversation widget.

The widget never holds upstream credentials; it only talks to the nova
server, which attaches them. Errors map onto the same taxonomy as the
in-process gateway so the state machine treats both transports alike.
"""

from typing import Any, Dict, List, Optional, Sequence

import httpx

from nova.exceptions import UpstreamRejectionError, ValidationError
from nova.logger import Logger, session_logger
from nova.upstream.http import request_upstream
from nova.upstream.models import UpstreamStep, steps_from_wire

SERVICE_NAME = "nova-api"
DEFAULT_TIMEOUT_SECONDS = 60.0


class NovaApiClient:
    """Async client for /api/voiceflow and /api/transcripts."""

    def __init__(
        self,
        base_url: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        logger: Optional[Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = logger or session_logger

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "NovaApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def bootstrap(self, correlation_id: str) -> List[UpstreamStep]:
        body = await self._post_turn({"userId": correlation_id, "actionType": "launch"})
        return self._steps(body)

    async def send_message(
        self, correlation_id: str, message: str, services: Sequence[str] = ()
    ) -> List[UpstreamStep]:
        body = await self._post_turn(
            {
                "userId": correlation_id,
                "actionType": "text",
                "message": message,
                "services": list(services),
            }
        )
        return self._steps(body)

    async def save_transcript(self, correlation_id: Optional[str]) -> Dict[str, Any]:
        if not correlation_id:
            raise ValidationError("Missing required parameter: sessionID")
        response = await request_upstream(
            self.client,
            "PUT",
            f"{self.base_url}/api/transcripts",
            service=SERVICE_NAME,
            logger=self.logger,
            json={"sessionID": correlation_id},
        )
        return self._json(response)

    async def _post_turn(self, body: Dict[str, Any]) -> Dict[str, Any]:
        if not body.get("userId"):
            raise ValidationError("Missing required parameter: userId")
        response = await request_upstream(
            self.client,
            "POST",
            f"{self.base_url}/api/voiceflow",
            service=SERVICE_NAME,
            logger=self.logger,
            json=body,
        )
        return self._json(response)

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError:
            raise UpstreamRejectionError(response.status_code, response.text, service=SERVICE_NAME)
        if not isinstance(data, dict):
            raise UpstreamRejectionError(response.status_code, response.text, service=SERVICE_NAME)
        return data

    @staticmethod
    def _steps(body: Dict[str, Any]) -> List[UpstreamStep]:
        steps = body.get("steps")
        if not isinstance(steps, list):
            return []
        return steps_from_wire(steps)

"""Upstream conversational gateway.

Forwards bootstrap ("launch") and message ("text") turns to the upstream
runtime with the server-held credential attached, then normalizes document
references and translates the returned step list.
"""

from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import quote

import httpx

from nova.config import Config
from nova.exceptions import ConfigurationError, UpstreamRejectionError, ValidationError
from nova.logger import Logger, session_logger
from nova.normalization import normalize_steps
from nova.upstream.http import request_upstream, upstream_client
from nova.upstream.models import UpstreamStep, translate_steps
from nova.upstream.payload import compose_payload

SERVICE_NAME = "voiceflow"

# Response-shaping flags: no speech synthesis, no control/debug step kinds.
RESPONSE_CONFIG: Dict[str, Any] = {
    "tts": False,
    "stripSSML": True,
    "stopAll": False,
    "excludeTypes": ["block", "debug", "flow"],
}


class UpstreamGateway:
    """Server-side proxy to the upstream conversational runtime."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        runtime_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the gateway.

        Args:
            api_key: Upstream credential (default: VOICEFLOW_API_KEY at call time)
            runtime_url: Runtime base URL (default: VOICEFLOW_RUNTIME_URL)
            timeout: Request timeout in seconds (default: NOVA_UPSTREAM_TIMEOUT_SECONDS)
            client: Optional shared httpx.AsyncClient (not closed by the gateway)
            logger: Logger instance
        """
        self._api_key = api_key
        self._runtime_url = runtime_url
        self._timeout = timeout
        self.client = client
        self.logger = logger or session_logger

    @property
    def runtime_url(self) -> str:
        return (self._runtime_url or Config.get_runtime_url()).rstrip("/")

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else Config.get_upstream_timeout()

    def _require_api_key(self) -> str:
        api_key = self._api_key or Config.get_upstream_api_key()
        if not api_key:
            self.logger.error("Upstream credential missing", variable="VOICEFLOW_API_KEY")
            raise ConfigurationError(
                "Server configuration error: upstream API key missing",
                details={"variable": "VOICEFLOW_API_KEY"},
            )
        return api_key

    @staticmethod
    def _require_correlation_id(correlation_id: Optional[str]) -> str:
        if not correlation_id or not correlation_id.strip():
            raise ValidationError("Missing required parameter: userId")
        return correlation_id

    async def bootstrap(self, correlation_id: str) -> List[UpstreamStep]:
        """Send the "start conversation" signal for this correlation id."""
        return await self._interact(correlation_id, {"type": "launch"})

    async def send_message(
        self, correlation_id: str, message: str, services: Sequence[str] = ()
    ) -> List[UpstreamStep]:
        """Send one visitor message together with the selected services."""
        return await self.send_payload(correlation_id, compose_payload(message, services))

    async def send_payload(self, correlation_id: str, payload: str) -> List[UpstreamStep]:
        """Send an already composed text payload."""
        return await self._interact(correlation_id, {"type": "text", "payload": payload})

    async def _interact(self, correlation_id: str, action: Dict[str, Any]) -> List[UpstreamStep]:
        correlation_id = self._require_correlation_id(correlation_id)
        api_key = self._require_api_key()
        url = f"{self.runtime_url}/state/user/{quote(correlation_id, safe='')}/interact"

        self.logger.info("Upstream interact", correlation_id=correlation_id, action=action["type"])

        async with upstream_client(self.client, self.timeout) as client:
            response = await request_upstream(
                client,
                "POST",
                url,
                service=SERVICE_NAME,
                logger=self.logger,
                params={"logs": "off"},
                headers={
                    "accept": "application/json",
                    "content-type": "application/json",
                    "Authorization": api_key,
                },
                json={"action": action, "config": RESPONSE_CONFIG},
            )

        raw_steps = self._decode_steps(response)
        steps = translate_steps(normalize_steps(raw_steps))
        self.logger.info(
            "Upstream interact completed",
            correlation_id=correlation_id,
            action=action["type"],
            raw_steps=len(raw_steps),
            steps=len(steps),
        )
        return steps

    def _decode_steps(self, response: httpx.Response) -> List[Dict[str, Any]]:
        try:
            data = response.json()
        except ValueError:
            self.logger.error("Upstream returned a non-JSON body", status=response.status_code)
            raise UpstreamRejectionError(502, response.text, service=SERVICE_NAME)
        if not isinstance(data, list):
            self.logger.error("Upstream returned an unexpected body", body_type=type(data).__name__)
            raise UpstreamRejectionError(502, response.text, service=SERVICE_NAME)
        return data

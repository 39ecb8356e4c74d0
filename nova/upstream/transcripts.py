"""Transcript sink: asks the upstream backend to persist a conversation."""

from typing import Any, Dict, Optional

import httpx

from nova.config import Config
from nova.exceptions import ConfigurationError, ValidationError
from nova.logger import Logger, session_logger
from nova.upstream.http import request_upstream, upstream_client

SERVICE_NAME = "voiceflow-transcripts"


class TranscriptSink:
    """Best-effort durability for a finished or ongoing conversation."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        project_id: Optional[str] = None,
        version_id: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[Logger] = None,
    ):
        self._api_key = api_key
        self._project_id = project_id
        self._version_id = version_id
        self._api_url = api_url
        self._timeout = timeout
        self.client = client
        self.logger = logger or session_logger

    @property
    def version_id(self) -> str:
        return self._version_id or Config.get_version_id()

    @property
    def api_url(self) -> str:
        return (self._api_url or Config.get_api_url()).rstrip("/")

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else Config.get_upstream_timeout()

    def _require_settings(self) -> Dict[str, str]:
        api_key = self._api_key or Config.get_transcript_api_key()
        project_id = self._project_id or Config.get_project_id()
        missing = []
        if not api_key:
            missing.append("VOICEFLOW_TRANSCRIPT_API_KEY")
        if not project_id:
            missing.append("VOICEFLOW_PROJECT_ID")
        if missing:
            self.logger.error("Transcript configuration missing", variables=",".join(missing))
            raise ConfigurationError(
                "Server configuration error: transcript settings missing",
                details={"variables": missing},
            )
        return {"api_key": api_key, "project_id": project_id}

    async def save_transcript(self, correlation_id: Optional[str]) -> Dict[str, Any]:
        """
        Request a durable transcript for the conversation keyed by correlation_id.

        Raises:
            ValidationError: correlation_id missing (no network call is made)
            ConfigurationError: credential or project id missing
            UpstreamRejectionError: upstream answered non-2xx
            TransportFailureError: upstream unreachable
        """
        if not correlation_id or not correlation_id.strip():
            raise ValidationError("Missing required parameter: sessionID")
        settings = self._require_settings()

        self.logger.info("Saving transcript", correlation_id=correlation_id)

        async with upstream_client(self.client, self.timeout) as client:
            response = await request_upstream(
                client,
                "PUT",
                f"{self.api_url}/v2/transcripts",
                service=SERVICE_NAME,
                logger=self.logger,
                headers={
                    "accept": "application/json",
                    "content-type": "application/json",
                    "Authorization": settings["api_key"],
                },
                json={
                    "projectID": settings["project_id"],
                    "versionID": self.version_id,
                    "sessionID": correlation_id,
                },
            )

        try:
            result = response.json()
        except ValueError:
            result = {}
        self.logger.info("Transcript saved", correlation_id=correlation_id)
        return result if isinstance(result, dict) else {"result": result}

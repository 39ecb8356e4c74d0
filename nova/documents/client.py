"""Client for the document-generation service (download only)."""

from typing import Optional
from urllib.parse import quote

import httpx

from nova.config import Config
from nova.exceptions import ConfigurationError, ValidationError
from nova.logger import Logger, session_logger
from nova.upstream.http import request_upstream, upstream_client

SERVICE_NAME = "pandadoc"


class DocumentClient:
    """Fetches rendered PDFs by document id."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[Logger] = None,
    ):
        self._api_key = api_key
        self._api_url = api_url
        self._timeout = timeout
        self.client = client
        self.logger = logger or session_logger

    @property
    def api_url(self) -> str:
        return (self._api_url or Config.get_document_api_url()).rstrip("/")

    @property
    def timeout(self) -> float:
        return self._timeout if self._timeout is not None else Config.get_upstream_timeout()

    async def fetch_document(self, document_id: Optional[str]) -> bytes:
        """Download the PDF for document_id."""
        if not document_id or not document_id.strip():
            raise ValidationError("Missing documentId")
        api_key = self._api_key or Config.get_document_api_key()
        if not api_key:
            self.logger.error("Document service credential missing", variable="PANDADOC_API_KEY")
            raise ConfigurationError(
                "Server configuration error: document API key missing",
                details={"variable": "PANDADOC_API_KEY"},
            )

        self.logger.info("Fetching document", document_id=document_id)
        url = f"{self.api_url}/public/v1/documents/{quote(document_id, safe='')}/download"
        async with upstream_client(self.client, self.timeout) as client:
            response = await request_upstream(
                client,
                "GET",
                url,
                service=SERVICE_NAME,
                logger=self.logger,
                headers={"Authorization": f"API-Key {api_key}", "Accept": "application/pdf"},
            )
        self.logger.info("Document fetched", document_id=document_id, size=len(response.content))
        return response.content

"""Nova Web Server - server side of the conversation widget.

Exposes:
- Upstream gateway endpoint (bootstrap and message turns)
- Transcript save endpoint
- Pending document webhook (store / pick up once)
- Document download proxy

Upstream credentials live only here; the browser never sees them.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse, Response

from nova.config import Config
from nova.documents import DocumentClient, PendingDocumentStore
from nova.exceptions import (
    ConfigurationError,
    NovaError,
    TransportFailureError,
    UpstreamRejectionError,
    ValidationError,
)
from nova.logger import Logger, session_logger
from nova.upstream import TranscriptSink, UpstreamGateway

ACTION_LAUNCH = "launch"
ACTION_TEXT = "text"


def _error(status_code: int, error: str, details: Optional[Any] = None) -> JSONResponse:
    content: Dict[str, Any] = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


class NovaWebServer:
    """FastAPI web server proxying the conversation widget to upstream services."""

    def __init__(
        self,
        gateway: Optional[UpstreamGateway] = None,
        transcript_sink: Optional[TranscriptSink] = None,
        document_client: Optional[DocumentClient] = None,
        pending_documents: Optional[PendingDocumentStore] = None,
        logger: Optional[Logger] = None,
    ):
        """
        Initialize the Nova web server.

        Args:
            gateway: Upstream conversational gateway (default: env-configured)
            transcript_sink: Transcript sink (default: env-configured)
            document_client: Document download client (default: env-configured)
            pending_documents: Pending document store (default: in-memory, env TTL)
            logger: Logger instance

        Endpoints exposed:
            GET /ping - Health check
            POST /api/voiceflow - Bootstrap or message turn
            PUT /api/transcripts - Save a conversation transcript
            POST /api/plan - Store a pending document notice
            GET /api/plan - Pick up a pending document notice once
            GET /api/pandadoc - Download a generated document
        """
        self.app = FastAPI(title="nova", description="Conversation widget proxy and normalization API")
        self.logger: Logger = logger or session_logger

        self.gateway = gateway or UpstreamGateway(logger=self.logger)
        self.transcript_sink = transcript_sink or TranscriptSink(logger=self.logger)
        self.document_client = document_client or DocumentClient(logger=self.logger)
        self.pending_documents = pending_documents or PendingDocumentStore(
            ttl_seconds=Config.get_pending_document_ttl_seconds(), logger=self.logger
        )

        self.logger.info(
            "Nova web server initialized",
            runtime_url=self.gateway.runtime_url,
            upstream_api_key_set=Config.get_upstream_api_key() is not None,
            endpoints=["voiceflow", "transcripts", "plan", "pandadoc"],
        )
        self._setup_routes()

    def _upstream_error(self, route: str, exc: NovaError) -> JSONResponse:
        """Render gateway errors: rejection status and body pass through verbatim."""
        if isinstance(exc, ValidationError):
            self.logger.warning(f"{route} rejected (validation)", error=exc.message, status=400)
            return _error(400, exc.message)
        if isinstance(exc, ConfigurationError):
            self.logger.error(f"{route} failed (configuration)", error=exc.message, status=500)
            return _error(500, exc.message)
        if isinstance(exc, UpstreamRejectionError):
            self.logger.error(
                f"{route} failed (upstream rejected)", status=exc.status_code, service=exc.service
            )
            return _error(exc.status_code, exc.body)
        if isinstance(exc, TransportFailureError):
            self.logger.error(f"{route} failed (transport)", error=exc.message, status=502)
            return _error(502, "Upstream unreachable", exc.message)
        self.logger.error(f"{route} failed", error=exc.message, error_type=type(exc).__name__)
        return _error(500, "Internal server error", exc.message)

    @staticmethod
    def _parse_services(raw: Any) -> List[str]:
        if raw is None:
            return []
        if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
            raise ValidationError("services must be a list of strings")
        return raw

    def _setup_routes(self):
        """Set up all API routes."""

        @self.app.get("/ping")
        async def ping():
            """Health check endpoint."""
            current_time = datetime.now().isoformat()
            self.logger.debug("GET /ping", timestamp=current_time)
            return JSONResponse(
                content={"status": "ok", "timestamp": current_time, "service": "nova"}
            )

        # ====================================================================
        # CONVERSATION ENDPOINTS
        # ====================================================================

        @self.app.post("/api/voiceflow")
        async def interact(request_body: Dict[str, Any]):
            """
            Forward one turn to the upstream runtime.

            Request body:
            - userId: CorrelationId (required)
            - actionType: "launch" (default) or "text"
            - message: Visitor text (text turns)
            - services: Selected service tags (text turns, optional)
            - payload: Pre-composed payload, used instead of message/services
            """
            user_id = request_body.get("userId")
            action_type = request_body.get("actionType", ACTION_LAUNCH)
            self.logger.info("POST /api/voiceflow", user_id=user_id, action=action_type)

            try:
                if not isinstance(user_id, str) or not user_id.strip():
                    raise ValidationError("Missing required parameter: userId")

                if action_type == ACTION_LAUNCH:
                    steps = await self.gateway.bootstrap(user_id)
                elif action_type == ACTION_TEXT:
                    payload = request_body.get("payload")
                    message = request_body.get("message")
                    if isinstance(payload, str) and message is None:
                        steps = await self.gateway.send_payload(user_id, payload)
                    else:
                        if not isinstance(message, str) or not message.strip():
                            raise ValidationError("Missing required parameter: message")
                        services = self._parse_services(request_body.get("services"))
                        steps = await self.gateway.send_message(user_id, message, services)
                else:
                    raise ValidationError(f"Unknown actionType '{action_type}'")
            except NovaError as e:
                return self._upstream_error("/api/voiceflow", e)

            self.logger.info("/api/voiceflow completed", user_id=user_id, steps=len(steps), status=200)
            return JSONResponse(content={"steps": [step.to_wire() for step in steps]})

        @self.app.put("/api/transcripts")
        async def save_transcript(request_body: Dict[str, Any]):
            """Ask the upstream backend to persist the transcript for sessionID."""
            session_id = request_body.get("sessionID")
            self.logger.info("PUT /api/transcripts", session_id=session_id)

            if not isinstance(session_id, str) or not session_id.strip():
                self.logger.warning("/api/transcripts rejected (validation)", status=400)
                return _error(400, "Missing required parameter: sessionID")

            try:
                result = await self.transcript_sink.save_transcript(session_id)
            except UpstreamRejectionError as e:
                self.logger.error(
                    "/api/transcripts failed (upstream rejected)",
                    session_id=session_id,
                    status=e.status_code,
                )
                return _error(e.status_code, f"Voiceflow API error: HTTP {e.status_code}", e.body)
            except NovaError as e:
                return self._upstream_error("/api/transcripts", e)

            self.logger.info("/api/transcripts completed", session_id=session_id, status=200)
            return JSONResponse(content={"success": True, "transcript": result})

        # ====================================================================
        # DOCUMENT HAND-OFF ENDPOINTS
        # ====================================================================

        @self.app.post("/api/plan")
        async def store_pending_document(request_body: Dict[str, Any]):
            """
            Webhook: store a pending document for a conversation.

            Fields may be top-level or nested under "data":
            - userID: CorrelationId (required)
            - documentID: Generated document id (required)
            - text: Optional accompanying text
            """
            nested = request_body.get("data")
            nested = nested if isinstance(nested, dict) else {}
            user_id = request_body.get("userID") or nested.get("userID")
            document_id = request_body.get("documentID") or nested.get("documentID")
            text = request_body.get("text") or nested.get("text")

            self.logger.info("POST /api/plan", user_id=user_id, document_id=document_id)

            if not user_id or not document_id:
                self.logger.warning("/api/plan rejected (validation)", status=400)
                return JSONResponse(
                    status_code=400,
                    content={
                        "success": False,
                        "error": "Missing required fields: userID and documentID",
                    },
                )

            self.pending_documents.store(str(user_id), str(document_id), text)
            return JSONResponse(
                content={
                    "success": True,
                    "message": f"Document {document_id} ready for retrieval by user {user_id}.",
                }
            )

        @self.app.get("/api/plan")
        async def take_pending_document(user_id: Optional[str] = Query(None, alias="userID")):
            """Return the pending document for userID once, then forget it."""
            if not user_id:
                self.logger.warning("GET /api/plan missing userID", status=400)
                return _error(400, "Missing userID query parameter")

            self.logger.info("GET /api/plan", user_id=user_id)
            pending = self.pending_documents.take(user_id)
            return JSONResponse(
                content={"pendingDocument": pending.to_dict() if pending else None}
            )

        @self.app.get("/api/pandadoc")
        async def get_document(document_id: Optional[str] = Query(None, alias="documentId")):
            """Stream a generated document as an inline PDF."""
            self.logger.info("GET /api/pandadoc", document_id=document_id)
            try:
                content = await self.document_client.fetch_document(document_id)
            except UpstreamRejectionError as e:
                self.logger.error(
                    "/api/pandadoc failed (upstream rejected)",
                    document_id=document_id,
                    status=e.status_code,
                )
                return _error(
                    e.status_code, f"Failed to retrieve document (Status: {e.status_code})"
                )
            except NovaError as e:
                return self._upstream_error("/api/pandadoc", e)

            return Response(
                content=content,
                media_type="application/pdf",
                headers={"Content-Disposition": "inline"},
            )

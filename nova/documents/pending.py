"""In-memory store of documents waiting to be picked up by a conversation.

The upstream flow calls a webhook once a document is generated; the widget
polls with its correlation id and receives the notice exactly once.
Entries expire after a TTL and are swept on every store/take.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from nova.logger import Logger, session_logger


@dataclass
class PendingDocument:
    """A generated document waiting for its conversation."""

    document_id: str
    expires_at: float
    text: Optional[str] = None

    def to_dict(self) -> dict:
        return {"documentID": self.document_id, "text": self.text}


class PendingDocumentStore:
    """Thread-safe map of correlation id to its latest pending document."""

    def __init__(
        self,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
        logger: Optional[Logger] = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self.logger = logger or session_logger
        self._documents: Dict[str, PendingDocument] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def store(self, user_id: str, document_id: str, text: Optional[str] = None) -> PendingDocument:
        """Store (or replace) the pending document for user_id."""
        pending = PendingDocument(
            document_id=document_id,
            text=text,
            expires_at=self.clock() + self.ttl_seconds,
        )
        with self._lock:
            self._documents[user_id] = pending
            self._sweep_locked()
        self.logger.info(
            "Pending document stored",
            user_id=user_id,
            document_id=document_id,
            ttl_seconds=self.ttl_seconds,
        )
        return pending

    def take(self, user_id: str) -> Optional[PendingDocument]:
        """Return and remove the pending document for user_id, if any."""
        with self._lock:
            self._sweep_locked()
            pending = self._documents.pop(user_id, None)
        if pending is None:
            self.logger.debug("No pending document", user_id=user_id)
        else:
            self.logger.info(
                "Pending document retrieved", user_id=user_id, document_id=pending.document_id
            )
        return pending

    def sweep(self) -> int:
        with self._lock:
            return self._sweep_locked()

    def _sweep_locked(self) -> int:
        now = self.clock()
        expired = [user_id for user_id, doc in self._documents.items() if doc.expires_at < now]
        for user_id in expired:
            del self._documents[user_id]
        if expired:
            self.logger.info("Expired pending documents removed", count=len(expired))
        return len(expired)

"""Per-session correlation identifier used as the upstream conversation key."""

import uuid
from typing import Callable, Optional

from nova.identity.storage import SessionStorage
from nova.logger import Logger, session_logger

STORAGE_KEY = "nova-user-id"


def _new_id() -> str:
    return str(uuid.uuid4())


class IdentityManager:
    """Issues the CorrelationId lazily and returns the same value afterwards.

    When no storage is available yet, `get_or_create_id` returns None rather
    than a throwaway id; callers treat that as "not ready".
    """

    def __init__(
        self,
        storage: Optional[SessionStorage],
        key: str = STORAGE_KEY,
        id_factory: Callable[[], str] = _new_id,
        logger: Optional[Logger] = None,
    ) -> None:
        self.storage = storage
        self.key = key
        self.id_factory = id_factory
        self.logger = logger or session_logger

    def get_or_create_id(self) -> Optional[str]:
        if self.storage is None or not self.storage.is_available():
            self.logger.debug("Session storage unavailable, no correlation id yet")
            return None

        existing = self.storage.get_item(self.key)
        if existing:
            return existing

        stored = self.storage.set_if_absent(self.key, self.id_factory())
        self.logger.info("Correlation id issued", correlation_id=stored)
        return stored

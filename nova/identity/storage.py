"""Session-scoped key/value storage backends.

A session storage lives exactly as long as one browsing session. Values are
written once with `set_if_absent` and never overwritten, so concurrent
first-use callers converge on a single stored value.
"""

from __future__ import annotations

import json
import re
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from nova.config import Config
from nova.logger import Logger

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]{1,128}$")


class SessionStorage(ABC):
    """Minimal session storage contract."""

    def is_available(self) -> bool:
        return True

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value or None."""

    @abstractmethod
    def set_if_absent(self, key: str, value: str) -> str:
        """Store value unless key already exists; return the value now stored."""


class InMemorySessionStorage(SessionStorage):
    """Process-local storage; one instance per browsing session."""

    def __init__(self) -> None:
        self._items: Dict[str, str] = {}
        self._lock = threading.Lock()

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._items.get(key)

    def set_if_absent(self, key: str, value: str) -> str:
        with self._lock:
            return self._items.setdefault(key, value)


class UnavailableSessionStorage(SessionStorage):
    """Stand-in for contexts with no storage yet (e.g. server-side prerender)."""

    def is_available(self) -> bool:
        return False

    def get_item(self, key: str) -> Optional[str]:
        return None

    def set_if_absent(self, key: str, value: str) -> str:
        raise RuntimeError("Session storage is not available")


class FileSessionStorage(SessionStorage):
    """File-backed storage: one JSON file per key under a session directory.

    Files are created with exclusive mode so only the first writer wins.
    """

    def __init__(self, base_dir: Optional[str] = None, logger: Optional[Logger] = None) -> None:
        self.base_dir = Path(base_dir) if base_dir else Config.get_identity_dir()
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.logger = logger

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid storage key '{key}'")
        return self.base_dir / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return data.get("value")

    def set_if_absent(self, key: str, value: str) -> str:
        path = self._path(key)
        try:
            with path.open("x", encoding="utf-8") as handle:
                json.dump({"key": key, "value": value}, handle)
        except FileExistsError:
            existing = self.get_item(key)
            if existing is not None:
                return existing
            raise
        if self.logger:
            self.logger.debug("Session item stored", key=key, path=str(path))
        return value

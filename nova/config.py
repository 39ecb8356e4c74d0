"""Runtime configuration for nova.

Values are read from the environment on every call so tests (and a long
running server after a reload) always see the current settings.
Credentials are returned as-is; callers decide whether absence is fatal.
"""

import os
from pathlib import Path
from typing import Optional

DEFAULT_RUNTIME_URL = "https://general-runtime.voiceflow.com"
DEFAULT_API_URL = "https://api.voiceflow.com"
DEFAULT_PANDADOC_API_URL = "https://api.pandadoc.com"
DEFAULT_VERSION_ID = "production"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 30.0
DEFAULT_PENDING_DOCUMENT_TTL_MINUTES = 30


def _env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


class Config:
    """Environment-backed configuration accessors."""

    _test_data_dir: Optional[Path] = None

    # ------------------------------------------------------------------
    # Conversational backend
    # ------------------------------------------------------------------

    @classmethod
    def get_upstream_api_key(cls) -> Optional[str]:
        return _env("VOICEFLOW_API_KEY")

    @classmethod
    def get_transcript_api_key(cls) -> Optional[str]:
        """Transcript credential; falls back to the runtime credential."""
        return _env("VOICEFLOW_TRANSCRIPT_API_KEY") or cls.get_upstream_api_key()

    @classmethod
    def get_project_id(cls) -> Optional[str]:
        return _env("VOICEFLOW_PROJECT_ID")

    @classmethod
    def get_version_id(cls) -> str:
        return _env("VOICEFLOW_VERSION_ID") or DEFAULT_VERSION_ID

    @classmethod
    def get_runtime_url(cls) -> str:
        return (_env("VOICEFLOW_RUNTIME_URL") or DEFAULT_RUNTIME_URL).rstrip("/")

    @classmethod
    def get_api_url(cls) -> str:
        return (_env("VOICEFLOW_API_URL") or DEFAULT_API_URL).rstrip("/")

    @classmethod
    def get_upstream_timeout(cls) -> float:
        raw = _env("NOVA_UPSTREAM_TIMEOUT_SECONDS")
        if raw is None:
            return DEFAULT_UPSTREAM_TIMEOUT_SECONDS
        try:
            value = float(raw)
        except ValueError:
            return DEFAULT_UPSTREAM_TIMEOUT_SECONDS
        return value if value > 0 else DEFAULT_UPSTREAM_TIMEOUT_SECONDS

    # ------------------------------------------------------------------
    # Document service
    # ------------------------------------------------------------------

    @classmethod
    def get_document_api_key(cls) -> Optional[str]:
        return _env("PANDADOC_API_KEY")

    @classmethod
    def get_document_api_url(cls) -> str:
        return (_env("PANDADOC_API_URL") or DEFAULT_PANDADOC_API_URL).rstrip("/")

    @classmethod
    def get_pending_document_ttl_seconds(cls) -> int:
        raw = _env("NOVA_PENDING_DOCUMENT_TTL_MINUTES")
        try:
            minutes = int(raw) if raw is not None else DEFAULT_PENDING_DOCUMENT_TTL_MINUTES
        except ValueError:
            minutes = DEFAULT_PENDING_DOCUMENT_TTL_MINUTES
        if minutes < 1:
            minutes = DEFAULT_PENDING_DOCUMENT_TTL_MINUTES
        return minutes * 60

    # ------------------------------------------------------------------
    # Local data
    # ------------------------------------------------------------------

    @classmethod
    def get_data_dir(cls) -> Path:
        if cls._test_data_dir is not None:
            return cls._test_data_dir
        return Path(_env("NOVA_DATA_DIR") or "data")

    @classmethod
    def get_identity_dir(cls) -> Path:
        return cls.get_data_dir() / "identity"

    @classmethod
    def set_test_mode(cls, data_dir: Path) -> None:
        cls._test_data_dir = Path(data_dir)

    @classmethod
    def clear_test_mode(cls) -> None:
        cls._test_data_dir = None

    @classmethod
    def is_test_mode(cls) -> bool:
        return cls._test_data_dir is not None

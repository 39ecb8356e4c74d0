"""Pytest configuration and fixtures

Provides shared fixtures for all tests: an isolated data directory, a clean
upstream environment, and a scripted fake upstream (see upstream_helpers).
"""

import sys
from pathlib import Path

import pytest

# Add project root and test directory to sys.path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from nova.config import Config
from upstream_helpers import API_URL, RUNTIME_URL, TEST_API_KEY, TEST_PROJECT_ID, FakeUpstream

UPSTREAM_ENV_VARS = (
    "VOICEFLOW_API_KEY",
    "VOICEFLOW_PROJECT_ID",
    "VOICEFLOW_VERSION_ID",
    "VOICEFLOW_TRANSCRIPT_API_KEY",
    "VOICEFLOW_RUNTIME_URL",
    "VOICEFLOW_API_URL",
    "PANDADOC_API_KEY",
    "PANDADOC_API_URL",
    "NOVA_UPSTREAM_TIMEOUT_SECONDS",
    "NOVA_PENDING_DOCUMENT_TTL_MINUTES",
    "NOVA_DATA_DIR",
)


@pytest.fixture(scope="function", autouse=True)
def test_data_dir(tmp_path):
    """
    Automatically provide a temporary data directory for each test

    Configures nova.config to use it and restores the default afterwards.
    """
    test_dir = tmp_path / "nova_test_data"
    test_dir.mkdir(parents=True, exist_ok=True)
    Config.set_test_mode(test_dir)

    yield test_dir

    Config.clear_test_mode()


@pytest.fixture(scope="function", autouse=True)
def clean_upstream_env(monkeypatch):
    """Remove any upstream configuration inherited from the host environment."""
    for name in UPSTREAM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch


@pytest.fixture
def upstream_env(clean_upstream_env):
    """Complete upstream configuration pointing at test URLs."""
    clean_upstream_env.setenv("VOICEFLOW_API_KEY", TEST_API_KEY)
    clean_upstream_env.setenv("VOICEFLOW_PROJECT_ID", TEST_PROJECT_ID)
    clean_upstream_env.setenv("VOICEFLOW_RUNTIME_URL", RUNTIME_URL)
    clean_upstream_env.setenv("VOICEFLOW_API_URL", API_URL)
    return clean_upstream_env


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    """Scripted upstream; pass fake_upstream.client() to the component under test."""
    return FakeUpstream()

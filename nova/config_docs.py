"""Centralized configuration documentation and defaults for the NOVA service.

This module provides an overview of all configuration options and their
environment variable mappings.
"""

# =============================================================================
# ENVIRONMENT VARIABLES REFERENCE
# =============================================================================

# Conversational backend
# ----------------------
# VOICEFLOW_API_KEY: Runtime credential attached to every turn (required)
# VOICEFLOW_PROJECT_ID: Project identifier for transcript saves (required for transcripts)
# VOICEFLOW_VERSION_ID: Version channel for transcript saves (default: production)
# VOICEFLOW_TRANSCRIPT_API_KEY: Transcript credential (default: VOICEFLOW_API_KEY)
# VOICEFLOW_RUNTIME_URL: Runtime base URL (default: https://general-runtime.voiceflow.com)
# VOICEFLOW_API_URL: Management API base URL (default: https://api.voiceflow.com)
# NOVA_UPSTREAM_TIMEOUT_SECONDS: Per-request upstream timeout (default: 30)
#
# Document service
# ----------------
# PANDADOC_API_KEY: Credential for the document proxy (required for /api/pandadoc)
# PANDADOC_API_URL: Document service base URL (default: https://api.pandadoc.com)
# NOVA_PENDING_DOCUMENT_TTL_MINUTES: Lifetime of pending document notices (default: 30)
#
# Server
# ------
# NOVA_WEB_PORT: Web server port (default: 8020)
# NOVA_DATA_DIR: Base directory for file-backed identity storage (default: ./data)
# NOVA_LOG_LEVEL: Logging verbosity (default: INFO)
#   Values: DEBUG, INFO, WARNING, ERROR, CRITICAL

# =============================================================================
# CONFIGURATION DEFAULTS
# =============================================================================

DEFAULT_WEB_PORT = 8020
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# =============================================================================
# CONFIGURATION HELPER FUNCTIONS
# =============================================================================


def get_config_summary() -> dict:
    """Get a summary of current configuration from environment.

    Credentials are reported only as booleans.

    Returns:
        Dictionary with current configuration values
    """
    import os

    from nova.config import Config

    return {
        "runtime_url": Config.get_runtime_url(),
        "api_url": Config.get_api_url(),
        "project_id": Config.get_project_id(),
        "version_id": Config.get_version_id(),
        "upstream_api_key_set": Config.get_upstream_api_key() is not None,
        "transcript_api_key_set": Config.get_transcript_api_key() is not None,
        "document_api_key_set": Config.get_document_api_key() is not None,
        "document_api_url": Config.get_document_api_url(),
        "upstream_timeout_seconds": Config.get_upstream_timeout(),
        "pending_document_ttl_seconds": Config.get_pending_document_ttl_seconds(),
        "data_dir": str(Config.get_data_dir()),
        "web_port": int(os.getenv("NOVA_WEB_PORT", DEFAULT_WEB_PORT)),
        "log_level": os.getenv("NOVA_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    }


def validate_configuration() -> tuple[bool, list[str]]:
    """Validate current configuration for completeness and consistency.

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    import os

    from nova.config import Config

    errors = []

    if Config.get_upstream_api_key() is None:
        errors.append("VOICEFLOW_API_KEY is not set; conversation turns will fail")
    if Config.get_project_id() is None:
        errors.append("VOICEFLOW_PROJECT_ID is not set; transcript saves will fail")
    if Config.get_document_api_key() is None:
        errors.append("PANDADOC_API_KEY is not set; document previews will fail")

    port_str = os.getenv("NOVA_WEB_PORT", str(DEFAULT_WEB_PORT))
    try:
        port = int(port_str)
        if not (1024 <= port <= 65535):
            errors.append(f"NOVA_WEB_PORT={port} out of valid range (1024-65535)")
    except ValueError:
        errors.append(f"NOVA_WEB_PORT='{port_str}' is not a valid integer")

    log_level = os.getenv("NOVA_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    if log_level not in VALID_LOG_LEVELS:
        errors.append(f"NOVA_LOG_LEVEL='{log_level}' is not one of {', '.join(VALID_LOG_LEVELS)}")

    return len(errors) == 0, errors


def print_configuration_help() -> None:
    """Print configuration help to stdout."""
    help_text = """
NOVA CONFIGURATION REFERENCE
============================

CONVERSATIONAL BACKEND
  VOICEFLOW_API_KEY              Runtime credential (required)
  VOICEFLOW_PROJECT_ID           Project id for transcript saves
  VOICEFLOW_VERSION_ID           Version channel (default: production)
  VOICEFLOW_TRANSCRIPT_API_KEY   Transcript credential (default: VOICEFLOW_API_KEY)
  VOICEFLOW_RUNTIME_URL          Runtime base URL
  VOICEFLOW_API_URL              Management API base URL
  NOVA_UPSTREAM_TIMEOUT_SECONDS  Upstream timeout (default: 30)

DOCUMENT SERVICE
  PANDADOC_API_KEY                   Document proxy credential
  PANDADOC_API_URL                   Document service base URL
  NOVA_PENDING_DOCUMENT_TTL_MINUTES  Pending document lifetime (default: 30)

SERVER
  NOVA_WEB_PORT    Web server port (default: 8020)
  NOVA_DATA_DIR    Identity storage directory (default: ./data)
  NOVA_LOG_LEVEL   DEBUG | INFO | WARNING | ERROR | CRITICAL (default: INFO)

VALIDATION
  python -m nova.config_docs
"""
    print(help_text)


if __name__ == "__main__":
    print_configuration_help()
    print("=" * 79)
    print("CURRENT CONFIGURATION")
    print("=" * 79)

    import json

    print(json.dumps(get_config_summary(), indent=2))

    print("=" * 79)
    print("VALIDATION")
    print("=" * 79)

    is_valid, errors = validate_configuration()
    if is_valid:
        print("Configuration is valid")
    else:
        print("Configuration errors:")
        for error in errors:
            print(f"   - {error}")

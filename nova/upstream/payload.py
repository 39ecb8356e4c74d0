"""Outgoing turn payload composition."""

from typing import Sequence

SERVICES_DELIMITER = "::[SERVICES BEGIN]::"
SERVICES_SEPARATOR = ", "


def compose_payload(message: str, services: Sequence[str]) -> str:
    """Join the visitor's text and the selected services into one upstream payload.

    The delimiter is always present, even with no services selected, so the
    upstream flow can split on it unconditionally.
    """
    return f"{message}{SERVICES_DELIMITER}{SERVICES_SEPARATOR.join(services)}"

"""Correlation identity package."""
from nova.identity.manager import IdentityManager, STORAGE_KEY
from nova.identity.storage import (
    SessionStorage,
    InMemorySessionStorage,
    FileSessionStorage,
    UnavailableSessionStorage,
)

__all__ = [
    "IdentityManager",
    "STORAGE_KEY",
    "SessionStorage",
    "InMemorySessionStorage",
    "FileSessionStorage",
    "UnavailableSessionStorage",
]

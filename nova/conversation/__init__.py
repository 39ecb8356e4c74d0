"""Conversation widget core: entries, turn lifecycle and transport client."""
from nova.conversation.client import NovaApiClient
from nova.conversation.machine import ConversationStateMachine
from nova.conversation.models import (
    APOLOGY_MESSAGE,
    PENDING_MARKER,
    ConversationEntry,
    Origin,
    TurnState,
)
from nova.conversation.steps import entries_from_steps

__all__ = [
    "NovaApiClient",
    "ConversationStateMachine",
    "APOLOGY_MESSAGE",
    "PENDING_MARKER",
    "ConversationEntry",
    "Origin",
    "TurnState",
    "entries_from_steps",
]

"""Conversation entry and turn-state models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

PENDING_MARKER = "...Nova is writing a response"
APOLOGY_MESSAGE = "Sorry, something went wrong."


class Origin(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class TurnState(str, Enum):
    """Lifecycle of a single turn.

    SETTLED and FAILED behave like IDLE for the next submission.
    """

    IDLE = "idle"
    SENDING = "sending"
    AWAITING_UPSTREAM = "awaiting_upstream"
    SETTLED = "settled"
    FAILED = "failed"

    @property
    def accepts_submission(self) -> bool:
        return self in (TurnState.IDLE, TurnState.SETTLED, TurnState.FAILED)


class ConversationEntry(BaseModel):
    """One rendered unit of the conversation. Immutable once created."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    origin: Origin
    text: Optional[str] = None
    image_ref: Optional[str] = Field(default=None, alias="imageRef")
    document_id: Optional[str] = Field(default=None, alias="documentId")
    pending: bool = False

    @model_validator(mode="after")
    def _require_content(self) -> "ConversationEntry":
        if not (self.text or self.image_ref or self.document_id):
            raise ValueError("Conversation entry needs text, imageRef or documentId")
        return self

    @classmethod
    def user(cls, text: str) -> "ConversationEntry":
        return cls(origin=Origin.USER, text=text)

    @classmethod
    def placeholder(cls) -> "ConversationEntry":
        return cls(origin=Origin.ASSISTANT, text=PENDING_MARKER, pending=True)

    @classmethod
    def apology(cls) -> "ConversationEntry":
        return cls(origin=Origin.ASSISTANT, text=APOLOGY_MESSAGE)

"""Pydantic schemas for chat interactions."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


class Source(BaseModel):
    """Citation pointing at a retrieved passage of a source document."""

    model_config = ConfigDict(frozen=True)

    document: str = Field(..., description="Document identifier.")
    section: str = Field(default="", description="Section reference, may be empty.")
    subsection: str = Field(default="", description="Subsection reference, may be empty.")
    chunk_id: int = Field(..., description="Position of the chunk within the document.")
    page: int | None = Field(default=None, description="Page number when the document is paginated.")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique message identifier, stable for UI keying.")
    role: Role = Field(..., description="Conversation role.")
    content: str = Field(..., description="Message contents.")
    sources: tuple[Source, ...] | None = Field(default=None, description="Citations backing an assistant answer.")
    created_at: datetime = Field(default_factory=_utcnow)


class TurnStatus(str, Enum):
    """Lifecycle of an optimistically appended user turn."""

    PENDING = "pending"
    ANSWERED = "answered"
    FAILED = "failed"


class ExchangeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str
    conversation_id: str | None = Field(default=None, alias="conversationId")


class ExchangeResult(BaseModel):
    """Body returned by the answering service."""

    model_config = ConfigDict(extra="ignore")

    answer: str | None = None
    sources: list[Source] | None = None
    error: str | None = None


class ChatState(BaseModel):
    """Snapshot of the active chat session."""

    session_id: str | None = None
    messages: list[Message] = Field(default_factory=list)
    is_loading: bool = False
    error: str | None = None
    conversation_id: str | None = None


class SendMessageRequest(BaseModel):
    content: str = Field(..., description="User question about the documents.")
    session_id: str | None = Field(default=None, description="Chat session id; a new session is started when omitted.")


class NewChatRequest(BaseModel):
    session_id: str | None = Field(default=None, description="Chat session to reset; a new session is started when omitted.")


class NotificationsResponse(BaseModel):
    notifications: list[str] = Field(default_factory=list)

"""Pydantic models for chat feature."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]


class Message(BaseModel):
    """A single transcript entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    timestamp: datetime


class ChatSession(BaseModel):
    """Conversation transcript for one client-chosen session id."""

    id: str
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime
    last_activity: datetime


class ChatRequest(BaseModel):
    """Chat request model. Blank messages are rejected by the service."""

    model_config = ConfigDict(populate_by_name=True)

    message: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")
    context: str | None = None


class ChatResponse(BaseModel):
    """Chat response model."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    response: str
    session_id: str = Field(alias="sessionId")
    is_ai: bool = Field(alias="isAI")
    source: Literal["ai", "fallback"]
    timestamp: datetime | None = None


class HistoryResponse(BaseModel):
    """Transcript of a session."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    messages: list[Message]
    session_id: str = Field(alias="sessionId")
    created_at: datetime | None = Field(default=None, alias="createdAt")
    last_activity: datetime | None = Field(default=None, alias="lastActivity")

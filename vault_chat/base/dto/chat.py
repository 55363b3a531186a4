"""
Pydantic DTOs validating inbound chat payloads.

Purpose
-------
The chat panel sends ``{"messages": [...], "model": ...}`` payloads across
the host's message bridge. These DTOs validate that shape before it reaches
a stream session: roles are restricted, at least one message is required and
optional fields are normalised.

External dependencies: Pydantic v2 only (no network calls).

Failure semantics: validation raises ``pydantic.ValidationError``; the chat
handlers convert it into a single ``ai:error`` event.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models import ChatMessage

Role = Literal["system", "user", "assistant"]


class ChatMessageDTO(BaseModel):
    """One conversation turn as received from the chat panel."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str = ""

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content)


class ChatStartDTO(BaseModel):
    """Payload of a ``chat-start`` request.

    Attributes:
        messages: Ordered conversation; must contain at least one turn.
        model: Optional model id; blank strings are treated as missing so the
            provider default applies.
        session_id: Optional caller-supplied identifier used by the session
            registry. Missing ids fall back to a single default slot.
        provider: Optional provider override (``ollama`` or ``openai``).
    """

    messages: List[ChatMessageDTO] = Field(min_length=1)
    model: Optional[str] = None
    session_id: Optional[str] = None
    provider: Optional[Literal["ollama", "openai"]] = None

    @field_validator("model", "session_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value

    def to_messages(self) -> List[ChatMessage]:
        """Convert validated turns into immutable ``ChatMessage`` objects."""
        return [m.to_message() for m in self.messages]


__all__ = ["ChatMessageDTO", "ChatStartDTO"]

"""
Chat message DTO.

Defines the immutable `ChatMessage` dataclass and the `Role` literal. The
conversation is an ordered sequence of messages; a message has no identity
beyond its position in that sequence.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal

Role = Literal["system", "user", "assistant"]

ROLES = ("system", "user", "assistant")


@dataclass(frozen=True)
class ChatMessage:
    """A single chat turn.

    Attributes:
        role: ``"system"``, ``"user"`` or ``"assistant"``.
        content: Plain text body of the turn.

    Raises:
        ValueError: when ``role`` is not one of the supported roles or
            ``content`` is not a string.
    """

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"unsupported chat role: {self.role!r}")
        if not isinstance(self.content, str):
            raise ValueError("chat message content must be a string")

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire shape shared by both provider APIs."""
        return {"role": self.role, "content": self.content}


__all__ = ["ChatMessage", "Role", "ROLES"]

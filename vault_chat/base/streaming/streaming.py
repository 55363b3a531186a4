"""Streaming event primitives.

Tagged events form the pull-style rendition of a session's callbacks: zero or
more ``TOKEN`` events followed by exactly one ``DONE`` or ``ERROR`` event.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional


class EventKind(str, Enum):
    TOKEN = "token"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class StreamEvent:
    """One event of a chat stream.

    Fields:
      kind: ``TOKEN``, ``DONE`` or ``ERROR``
      text: token text for ``TOKEN`` events
      error: human-readable message for ``ERROR`` events
    """

    kind: EventKind
    text: str = ""
    error: Optional[str] = None

    @classmethod
    def token(cls, text: str) -> "StreamEvent":
        return cls(kind=EventKind.TOKEN, text=text)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(kind=EventKind.DONE)

    @classmethod
    def failure(cls, message: str) -> "StreamEvent":
        return cls(kind=EventKind.ERROR, error=message)

    @property
    def terminal(self) -> bool:
        return self.kind is not EventKind.TOKEN


@dataclass(frozen=True)
class ChatResult:
    """Accumulated outcome of a finished stream."""

    text: str
    error: Optional[str] = None
    token_count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


def accumulate_events(events: Iterable[StreamEvent]) -> ChatResult:
    """Concatenate token events into a :class:`ChatResult`.

    An ``ERROR`` event keeps the text received so far and records the message.
    """
    parts: List[str] = []
    for event in events:
        if event.kind is EventKind.TOKEN:
            parts.append(event.text)
        elif event.kind is EventKind.ERROR:
            return ChatResult(text="".join(parts), error=event.error, token_count=len(parts))
        else:
            break
    return ChatResult(text="".join(parts), token_count=len(parts))


__all__ = [
    "EventKind",
    "StreamEvent",
    "ChatResult",
    "accumulate_events",
]

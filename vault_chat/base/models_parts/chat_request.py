"""
ChatRequest DTO for one streaming exchange.

Built once per session from the caller's messages and model id and never
mutated after the request is sent.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from .message import ChatMessage


@dataclass(frozen=True)
class ChatRequest:
    """Normalized chat request handed to provider adapters.

    Attributes:
        model: Target model identifier.
        messages: Ordered conversation; insertion order is conversation order.
        stream: Always True for this client; kept explicit on the wire.
        max_output_tokens: Optional completion budget (hosted variant only).
    """

    model: str
    messages: Tuple[ChatMessage, ...] = field(default_factory=tuple)
    stream: bool = True
    max_output_tokens: Optional[int] = None

    def __post_init__(self) -> None:
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "messages", tuple(self.messages))
        if self.max_output_tokens is not None and self.max_output_tokens <= 0:
            raise ValueError("max_output_tokens must be positive")

    @classmethod
    def build(
        cls,
        model: str,
        messages: Iterable[ChatMessage],
        *,
        max_output_tokens: Optional[int] = None,
    ) -> "ChatRequest":
        return cls(model=model, messages=tuple(messages), max_output_tokens=max_output_tokens)

    def wire_messages(self) -> list[Dict[str, Any]]:
        """Return messages in the ``[{"role", "content"}, ...]`` wire shape."""
        return [m.to_dict() for m in self.messages]


__all__ = ["ChatRequest"]

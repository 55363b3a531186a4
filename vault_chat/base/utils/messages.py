"""Message construction helpers shared by the CLI and the chat handlers."""
from __future__ import annotations

from typing import Iterable, List, Optional

from ..models import ChatMessage


def build_messages(
    prompt: str,
    *,
    system: Optional[str] = None,
    history: Iterable[ChatMessage] = (),
) -> List[ChatMessage]:
    """Return ``[system?, *history, user(prompt)]``.

    A blank ``system`` is ignored. ``history`` is copied as-is so callers can
    replay an earlier conversation before the new prompt.
    """
    messages: List[ChatMessage] = []
    if system and system.strip():
        messages.append(ChatMessage(role="system", content=system.strip()))
    messages.extend(history)
    messages.append(ChatMessage(role="user", content=prompt))
    return messages


__all__ = ["build_messages"]

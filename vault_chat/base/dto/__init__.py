"""Validated inbound DTOs for the chat client."""

from .chat import ChatMessageDTO, ChatStartDTO

__all__ = ["ChatMessageDTO", "ChatStartDTO"]

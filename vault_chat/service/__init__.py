"""Service layer: session registry, IPC-style chat handlers and the CLI."""

from .registry import SessionRegistry
from .handlers import EVENT_DONE, EVENT_ERROR, EVENT_TOKEN, ChatHandlers

__all__ = ["SessionRegistry", "ChatHandlers", "EVENT_TOKEN", "EVENT_DONE", "EVENT_ERROR"]

"""
Provider-agnostic chat data models.

Re-exports the single-class modules under ``models_parts`` so callers import
from one stable path.
"""

from __future__ import annotations

from .models_parts import ChatMessage, ChatRequest, ModelInfo, Role, ROLES

__all__ = ["ChatMessage", "ChatRequest", "ModelInfo", "Role", "ROLES"]

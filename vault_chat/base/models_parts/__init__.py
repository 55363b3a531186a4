"""Single-class modules backing ``vault_chat.base.models``."""

from .message import ChatMessage, Role, ROLES
from .chat_request import ChatRequest
from .model_info import ModelInfo

__all__ = ["ChatMessage", "Role", "ROLES", "ChatRequest", "ModelInfo"]

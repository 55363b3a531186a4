"""vault_chat package

Streaming chat client for a local Ollama server or the hosted OpenAI API.

Purpose:
    Provide a small, stable API for hosts embedding a chat panel: start a
    stream, receive tokens through callbacks (or iterate events), cancel it.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
    - Sessions: :class:`StreamSession`, :class:`StreamController`
    - Adapters: :func:`create_adapter`, :class:`OllamaAdapter`,
      :class:`OpenAIAdapter`
    - Service: :class:`SessionRegistry`, :class:`ChatHandlers`

Example:
    >>> from vault_chat import ChatMessage, StreamSession, create_adapter
    >>> session = StreamSession(create_adapter("ollama"))
    >>> cancel = session.start(
    ...     [ChatMessage(role="user", content="hi")], None,
    ...     on_token=print, on_done=lambda: None, on_error=print,
    ... )
"""

from .base.errors import ErrorCode, ProviderError
from .base.factory import ProviderFactory, UnknownProviderError, create_adapter
from .base.models import ChatMessage, ModelInfo
from .base.streaming import StreamController, StreamEvent, StreamSession
from .ollama import OllamaAdapter
from .openai import OPENAI_MODELS, OpenAIAdapter
from .service import ChatHandlers, SessionRegistry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorCode",
    "ProviderError",
    "ProviderFactory",
    "UnknownProviderError",
    "create_adapter",
    "ChatMessage",
    "ModelInfo",
    "StreamSession",
    "StreamController",
    "StreamEvent",
    "OllamaAdapter",
    "OpenAIAdapter",
    "OPENAI_MODELS",
    "SessionRegistry",
    "ChatHandlers",
]

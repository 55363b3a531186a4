"""
Chat client base package.

Exports the provider-agnostic building blocks used by the adapters and the
service layer:
- Models: chat messages, requests and catalog entries
- Interfaces: the provider adapter strategy and model listing capability
- Streaming: chunk decoder, stream session and pull-style controller
- Transport: HTTP request value object and the httpx implementation
- Factory: lazy creation of provider adapters by canonical name
"""

from .factory import ProviderFactory, UnknownProviderError, create_adapter
from .interfaces import ModelListingProvider, ProviderAdapter
from .models import ChatMessage, ChatRequest, ModelInfo, Role
from .errors import ErrorCode, ProviderError, classify_exception
from .timeouts import SessionTimer, TimeoutConfig, get_timeout_config
from .cancellation import CancellationToken, CancelledError
from .http import HttpRequest, HttpxTransport, Transport
from .streaming import (
    ChunkDecoder,
    Framing,
    SessionState,
    StreamController,
    StreamEvent,
    StreamMetrics,
    StreamSession,
)

__all__ = [
    # Models
    "Role",
    "ChatMessage",
    "ChatRequest",
    "ModelInfo",
    # Interfaces
    "ProviderAdapter",
    "ModelListingProvider",
    # Factory
    "ProviderFactory",
    "UnknownProviderError",
    "create_adapter",
    # Errors
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    # Timeouts / cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "SessionTimer",
    "CancellationToken",
    "CancelledError",
    # Transport
    "HttpRequest",
    "Transport",
    "HttpxTransport",
    # Streaming
    "ChunkDecoder",
    "Framing",
    "SessionState",
    "StreamController",
    "StreamEvent",
    "StreamMetrics",
    "StreamSession",
]

"""HTTP transport package for stream sessions.

Exposes the transport contract and its httpx implementation.
"""

from .transport import Exchange, HttpRequest, Transport
from .client import HttpxExchange, HttpxTransport

__all__ = ["Exchange", "HttpRequest", "Transport", "HttpxExchange", "HttpxTransport"]

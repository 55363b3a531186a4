"""ProviderAdapter Protocol (single-class module).

Defines the strategy a stream session is parameterized with. Everything that
differs between providers (request shape, response framing, token extraction,
terminal detection and error wording) lives behind this interface; the
session itself is provider-agnostic.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ..http.transport import HttpRequest
from ..models import ChatMessage
from ..streaming.decoder import Framing


@runtime_checkable
class ProviderAdapter(Protocol):
    """Per-provider translation used by :class:`StreamSession`.

    Implementations must be stateless with respect to a single exchange so
    one adapter instance can serve many concurrent sessions.
    """

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g. ``"ollama"``."""
        ...

    @property
    def framing(self) -> Framing:
        """Line framing of the streamed response body."""
        ...

    @property
    def timeout_seconds(self) -> float:
        """Default idle timeout for sessions using this adapter."""
        ...

    @property
    def drains_error_body(self) -> bool:
        """Whether a non-200 body must be read before classifying the status."""
        ...

    def default_model(self) -> str:
        ...

    def resolve_credentials(self) -> Optional[str]:
        """Return the credential for this call (read fresh every time).

        Raises ``ProviderError`` with ``ErrorCode.CONFIG`` when a required
        credential is missing. Must not perform network I/O.
        """
        ...

    def build_request(
        self,
        messages: Sequence[ChatMessage],
        model: str,
        *,
        credential: Optional[str] = None,
    ) -> HttpRequest:
        ...

    def extract_token(self, record: Any) -> Optional[str]:
        """Return the text delta carried by ``record`` (``None`` when absent)."""
        ...

    def is_terminal(self, record: Any) -> bool:
        """Return True when ``record`` marks the end of the stream."""
        ...

    def classify_http_status(
        self,
        status: int,
        body: Optional[bytes] = None,
        *,
        model: Optional[str] = None,
    ) -> Optional[str]:
        """Return a user-facing error for ``status``; ``None`` means success.

        ``body`` is the drained response body when ``drains_error_body`` is
        set; ``model`` is the model the failed request asked for.
        """
        ...

    def classify_transport_error(self, exc: BaseException) -> str:
        """Return a user-facing message for a connection-level failure."""
        ...

    def timeout_message(self) -> str:
        ...

"""Ollama (local server) provider adapter.

Purpose:
        Translate chat sessions to the local Ollama HTTP API (default
        ``http://localhost:11434``). The adapter only shapes requests and
        interprets records; connection handling, timeouts and callbacks live
        in :class:`~vault_chat.base.streaming.session.StreamSession`.

Wire contract:
        - ``POST {host}/api/chat`` with ``{"model", "messages", "stream": true}``.
        - The body is newline-delimited JSON. ``message.content`` carries the
          next token; a record with ``done: true`` ends the stream.

External dependencies:
        None beyond the shared transport. Ollama is a local daemon and needs no
        API key.

Timeout strategy:
        Idle timeout defaults to ``get_timeout_config().local_timeout_seconds``
        (60 s) and may be overridden by the constructor or ``OLLAMA_TIMEOUT``.

Failure modes:
        - 404: the model is not installed.
        - 500: the daemon is unhealthy.
        - Connection refused: the daemon is not running on the configured host.
        Other statuses and transport errors fall back to generic messages.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence
from urllib.parse import urlsplit

from ..base.http import HttpRequest
from ..base.errors import is_connection_refused
from ..base.models import ChatMessage, ChatRequest
from ..base.streaming.decoder import Framing
from ..base.timeouts import get_timeout_config
from ..base.utils import coerce_non_empty_str, coerce_positive_float
from ..config import get_provider_config
from ..config.defaults import OLLAMA_CHAT_PATH, OLLAMA_DEFAULT_HOST, OLLAMA_DEFAULT_MODEL


class OllamaAdapter:
    """Local-server variant of :class:`~vault_chat.base.interfaces.ProviderAdapter`."""

    def __init__(
        self,
        host: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        """Resolve host, default model and timeout from the layered config.

        Parameters
        ----------
        host:
            Base URL of the daemon. Falls back to ``OLLAMA_HOST`` / the config
            file and finally ``http://localhost:11434``.
        model:
            Model used when a session does not name one.
        timeout_seconds:
            Idle timeout for sessions created with this adapter.
        """
        cfg = get_provider_config("ollama", overrides={"host": host, "model": model})
        self._host = coerce_non_empty_str(cfg.get("host"), OLLAMA_DEFAULT_HOST).rstrip("/")
        self._model = coerce_non_empty_str(cfg.get("model"), OLLAMA_DEFAULT_MODEL)
        fallback = get_timeout_config().local_timeout_seconds
        self._timeout = coerce_positive_float(
            timeout_seconds if timeout_seconds is not None else cfg.get("timeout"),
            fallback,
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def framing(self) -> Framing:
        return Framing.NDJSON

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def drains_error_body(self) -> bool:
        return False

    @property
    def host(self) -> str:
        return self._host

    @property
    def endpoint(self) -> str:
        return f"{self._host}{OLLAMA_CHAT_PATH}"

    def default_model(self) -> str:
        return self._model

    def resolve_credentials(self) -> Optional[str]:
        return None

    def build_request(
        self,
        messages: Sequence[ChatMessage],
        model: str,
        *,
        credential: Optional[str] = None,
    ) -> HttpRequest:
        request = ChatRequest.build(model or self._model, messages)
        body = {
            "model": request.model,
            "messages": request.wire_messages(),
            "stream": True,
        }
        return HttpRequest(
            url=self.endpoint,
            headers={"Content-Type": "application/json"},
            body=body,
        )

    def extract_token(self, record: Any) -> Optional[str]:
        if not isinstance(record, Mapping):
            return None
        message = record.get("message")
        if not isinstance(message, Mapping):
            return None
        content = message.get("content")
        return content if isinstance(content, str) and content else None

    def is_terminal(self, record: Any) -> bool:
        return isinstance(record, Mapping) and record.get("done") is True

    def classify_http_status(
        self,
        status: int,
        body: Optional[bytes] = None,
        *,
        model: Optional[str] = None,
    ) -> Optional[str]:
        if status == 200:
            return None
        if status == 404:
            return (
                f'Model "{model or self._model}" not found. '
                "Please ensure Ollama is running and the model is installed."
            )
        if status == 500:
            return "Ollama server error. Please check if Ollama is running correctly."
        return f"Ollama API Error: {status}"

    def classify_transport_error(self, exc: BaseException) -> str:
        if is_connection_refused(exc):
            return f"Cannot connect to Ollama. Please ensure Ollama is running on {self._authority()}"
        return str(exc) or type(exc).__name__

    def timeout_message(self) -> str:
        return "Request timeout: Ollama server did not respond"

    def _authority(self) -> str:
        parts = urlsplit(self._host)
        return parts.netloc or self._host


__all__ = ["OllamaAdapter"]

"""OpenAI (hosted API) provider adapter.

Purpose:
        Translate chat sessions to the OpenAI Chat Completions streaming API.
        Like the local adapter it only shapes requests and interprets records;
        the stream session owns the connection and the timer.

Wire contract:
        - ``POST {base_url}/chat/completions`` with
          ``{"model", "messages", "stream": true, "max_completion_tokens"}``
          and ``Authorization: Bearer <key>``.
        - The body is Server-Sent Events. Each ``data:`` line holds a JSON
          chunk whose ``choices[0].delta.content`` is the next token;
          ``data: [DONE]`` ends the stream.

Credentials:
        ``OPENAI_API_KEY`` is read from the process environment on every
        ``resolve_credentials`` call (``.env`` is loaded once beforehand), so a
        key added while the host runs is honoured by the next session. A
        missing key is a configuration error raised before any network I/O.

Timeout strategy:
        Idle timeout defaults to ``get_timeout_config().hosted_timeout_seconds``
        (120 s), overridable by the constructor or ``OPENAI_TIMEOUT``.

Failure modes:
        Non-200 bodies are drained and their ``error.message`` used, except for
        401, 429 and 500 which map to fixed guidance. DNS failures and refused
        connections report a connectivity hint.
"""

from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional, Sequence

import httpx

from ..base.errors import ErrorCode, ProviderError, is_connection_refused, is_name_resolution_failure
from ..base.http import HttpRequest
from ..base.models import ChatMessage, ChatRequest, ModelInfo
from ..base.streaming.decoder import DONE_SENTINEL, Framing
from ..base.timeouts import get_timeout_config
from ..base.utils import coerce_non_empty_str, coerce_positive_float
from ..config import ensure_env_loaded, get_provider_config
from ..config.defaults import (
    OPENAI_CHAT_PATH,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENAI_MAX_OUTPUT_TOKENS,
)
from ..config.env import get_env_var_name, resolve_provider_key
from .models import get_openai_models

_STATUS_MESSAGES = {
    401: "Invalid API key. Please check your OpenAI API key.",
    429: "Rate limit exceeded. Please wait a moment and try again.",
    500: "OpenAI server error. Please try again later.",
}

_CONNECT_MESSAGE = "Cannot connect to OpenAI. Please check your internet connection."


def _error_message_from_body(body: Optional[bytes]) -> Optional[str]:
    """Return ``error.message`` from a JSON error body, if there is one."""
    if not body:
        return None
    try:
        data = json.loads(body.decode("utf-8", errors="replace"))
    except json.JSONDecodeError:
        return None
    if not isinstance(data, Mapping):
        return None
    error = data.get("error")
    if isinstance(error, Mapping):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class OpenAIAdapter:
    """Hosted-API variant of :class:`~vault_chat.base.interfaces.ProviderAdapter`.

    Also implements ``ModelListingProvider`` through the static catalog.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> None:
        cfg = get_provider_config(
            "openai",
            overrides={
                "base_url": base_url,
                "model": model,
                "max_output_tokens": max_output_tokens,
            },
        )
        self._base_url = coerce_non_empty_str(cfg.get("base_url"), OPENAI_DEFAULT_BASE_URL).rstrip("/")
        self._model = coerce_non_empty_str(cfg.get("model"), OPENAI_DEFAULT_MODEL)
        self._max_output_tokens = int(cfg.get("max_output_tokens") or OPENAI_MAX_OUTPUT_TOKENS)
        fallback = get_timeout_config().hosted_timeout_seconds
        self._timeout = coerce_positive_float(
            timeout_seconds if timeout_seconds is not None else cfg.get("timeout"),
            fallback,
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def framing(self) -> Framing:
        return Framing.SSE

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def drains_error_body(self) -> bool:
        return True

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}{OPENAI_CHAT_PATH}"

    def default_model(self) -> str:
        return self._model

    def list_models(self) -> List[ModelInfo]:
        return get_openai_models()

    def resolve_credentials(self) -> Optional[str]:
        """Return the API key or raise ``ProviderError(CONFIG)``."""
        ensure_env_loaded()
        key, _ = resolve_provider_key(self.provider_name)
        if not key:
            env_name = get_env_var_name(self.provider_name) or "OPENAI_API_KEY"
            raise ProviderError(
                code=ErrorCode.CONFIG,
                message=f"{env_name} is not set in environment variables",
                provider=self.provider_name,
            )
        return key

    def build_request(
        self,
        messages: Sequence[ChatMessage],
        model: str,
        *,
        credential: Optional[str] = None,
    ) -> HttpRequest:
        request = ChatRequest.build(
            model or self._model,
            messages,
            max_output_tokens=self._max_output_tokens,
        )
        body = {
            "model": request.model,
            "messages": request.wire_messages(),
            "stream": True,
            "max_completion_tokens": request.max_output_tokens,
        }
        headers = {"Content-Type": "application/json"}
        if credential:
            headers["Authorization"] = f"Bearer {credential}"
        return HttpRequest(url=self.endpoint, headers=headers, body=body)

    def extract_token(self, record: Any) -> Optional[str]:
        if not isinstance(record, Mapping):
            return None
        choices = record.get("choices")
        if not isinstance(choices, list) or not choices:
            return None
        first = choices[0]
        delta = first.get("delta") if isinstance(first, Mapping) else None
        if not isinstance(delta, Mapping):
            return None
        content = delta.get("content")
        return content if isinstance(content, str) and content else None

    def is_terminal(self, record: Any) -> bool:
        return record is DONE_SENTINEL

    def classify_http_status(
        self,
        status: int,
        body: Optional[bytes] = None,
        *,
        model: Optional[str] = None,
    ) -> Optional[str]:
        if status == 200:
            return None
        if status in _STATUS_MESSAGES:
            return _STATUS_MESSAGES[status]
        return _error_message_from_body(body) or f"OpenAI API Error: {status}"

    def classify_transport_error(self, exc: BaseException) -> str:
        if (
            isinstance(exc, httpx.ConnectError)
            or is_connection_refused(exc)
            or is_name_resolution_failure(exc)
        ):
            return _CONNECT_MESSAGE
        return str(exc) or type(exc).__name__

    def timeout_message(self) -> str:
        return "Request timeout: OpenAI API did not respond"


__all__ = ["OpenAIAdapter"]

"""Chat handlers bridging a host message bus to stream sessions.

Purpose
-------
Mirror the desktop application's IPC surface in plain Python so any host
(Electron bridge, websocket server, test harness) can drive chats:

- ``chat_start(payload, emit)``: validate ``{"messages", "model", ...}``,
  start a session and forward its callbacks as ``ai:token``, ``ai:done`` and
  ``ai:error`` events.
- ``chat_stop(session_id)``: cancel a running session.
- ``get_models()``: return the model catalog for the panel's picker.

Event payloads
--------------
``emit(channel, data)`` receives a dict carrying ``session_id`` plus
``token`` (``ai:token``) or ``error`` (``ai:error``).

Failure semantics
-----------------
Payload validation errors, unknown providers, invalid provider configuration
and starts after ``shutdown`` are reported as one ``ai:error`` event; nothing
is raised back to the host.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ..base.dto import ChatStartDTO
from ..base.errors import ErrorCode
from ..base.factory import ProviderFactory, UnknownProviderError
from ..base.interfaces import ModelListingProvider, ProviderAdapter
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..config.defaults import DEFAULT_PROVIDER, DEFAULT_SESSION_ID
from .registry import SessionRegistry

Emit = Callable[[str, Dict[str, Any]], None]
AdapterFactory = Callable[[str], ProviderAdapter]

EVENT_TOKEN = "ai:token"
EVENT_DONE = "ai:done"
EVENT_ERROR = "ai:error"


def _validation_summary(error: ValidationError) -> str:
    first = error.errors()[0] if error.errors() else {}
    loc = ".".join(str(p) for p in first.get("loc", ()))
    msg = first.get("msg", "invalid value")
    return f"Invalid chat request: {loc}: {msg}" if loc else f"Invalid chat request: {msg}"


class ChatHandlers:
    """IPC-style facade over :class:`SessionRegistry`.

    Parameters:
        registry: Session registry; a fresh one is created when omitted.
        adapter_factory: ``provider -> adapter``; defaults to
            :meth:`ProviderFactory.create`. Adapters are cached per provider.
        provider: Provider used when a payload names none.
    """

    def __init__(
        self,
        *,
        registry: Optional[SessionRegistry] = None,
        adapter_factory: Optional[AdapterFactory] = None,
        provider: Optional[str] = None,
    ) -> None:
        self._registry = registry or SessionRegistry()
        self._adapter_factory: AdapterFactory = adapter_factory or ProviderFactory.create
        self._provider = provider or DEFAULT_PROVIDER
        self._adapters: Dict[str, ProviderAdapter] = {}
        self._logger = get_logger("service.handlers")

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    def adapter_for(self, provider: Optional[str] = None) -> ProviderAdapter:
        name = provider or self._provider
        if name not in self._adapters:
            self._adapters[name] = self._adapter_factory(name)
        return self._adapters[name]

    def chat_start(self, payload: Mapping[str, Any], emit: Emit) -> Optional[str]:
        """Validate ``payload`` and start streaming; return the session id.

        Returns ``None`` when the payload is rejected (an ``ai:error`` event
        has been emitted in that case).
        """
        raw_sid = payload.get("session_id") if isinstance(payload, Mapping) else None
        try:
            dto = ChatStartDTO.model_validate(payload)
        except ValidationError as e:
            self._reject(emit, raw_sid if isinstance(raw_sid, str) else None, _validation_summary(e))
            return None

        sid = dto.session_id or DEFAULT_SESSION_ID
        try:
            adapter = self.adapter_for(dto.provider)
        except UnknownProviderError as e:
            self._reject(emit, sid, str(e), code=ErrorCode.CONFIG)
            return None

        def on_token(text: str) -> None:
            emit(EVENT_TOKEN, {"session_id": sid, "token": text})

        def on_done() -> None:
            emit(EVENT_DONE, {"session_id": sid})

        def on_error(message: str) -> None:
            emit(EVENT_ERROR, {"session_id": sid, "error": message})

        try:
            self._registry.start(sid, adapter, dto.to_messages(), dto.model, on_token, on_done, on_error)
        except RuntimeError as e:
            # registry already shut down
            self._reject(emit, sid, str(e), code=ErrorCode.CANCELLED)
            return None
        return sid

    def chat_stop(self, session_id: Optional[str] = None) -> bool:
        """Cancel the session under ``session_id``; no event is emitted."""
        return self._registry.cancel(session_id, reason="stopped by user")

    def get_models(self, provider: Optional[str] = None) -> List[Dict[str, str]]:
        """Return ``[{"id", "name", "description"}, ...]`` for the provider.

        Providers without a static catalog return an empty list.
        """
        adapter = self.adapter_for(provider)
        if not isinstance(adapter, ModelListingProvider):
            return []
        return [m.to_dict() for m in adapter.list_models()]

    def shutdown(self) -> None:
        self._registry.shutdown()

    def _reject(
        self,
        emit: Emit,
        session_id: Optional[str],
        message: str,
        *,
        code: ErrorCode = ErrorCode.VALIDATION,
    ) -> None:
        normalized_log_event(
            self._logger,
            "handlers.rejected",
            LogContext(provider=self._provider, session_id=session_id),
            phase="start",
            error_code=code.value,
            emitted=False,
            tokens=None,
            error=message,
        )
        emit(EVENT_ERROR, {"session_id": session_id or DEFAULT_SESSION_ID, "error": message})


__all__ = ["ChatHandlers", "Emit", "EVENT_TOKEN", "EVENT_DONE", "EVENT_ERROR"]

"""Generic stream session driving one chat request.

Purpose:
    Own exactly one streaming exchange from request to terminal callback. The
    session is provider-agnostic: everything that differs between providers
    comes from the :class:`~vault_chat.base.interfaces.ProviderAdapter` it is
    parameterized with.

State machine::

    idle -> sent -> receiving -> completed
                 \\           \\-> errored
                  \\-> errored  \\-> aborted (timeout or cancel)

    ``completed``, ``errored`` and ``aborted`` are terminal. The first
    terminal transition wins; later ones (for example an end-of-body after a
    terminal record, or a timeout racing a transport error) are ignored.

Callbacks:
    ``on_token(text)`` fires zero or more times, in stream order, and is
    followed by exactly one of ``on_done()`` or ``on_error(message)`` unless
    the caller cancels. Callbacks are serialized by a re-entrant lock, so a
    callback may call the cancel handle without deadlocking. Exceptions raised
    by callbacks are logged and do not affect the stream.

Timeout strategy:
    A single idle timer (``SessionTimer``) is armed when the request is issued
    and re-armed on every received fragment. Expiry before a terminal
    transition closes the connection and reports the adapter's timeout
    message. A timeout raised by the transport itself is reported the
    same way.

Resources:
    The timer and the transport exchange are released on every terminal
    transition, including cancellation.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, Iterable, List, NamedTuple, Optional

from ..cancellation import CancellationToken
from ..errors import ErrorCode, ProviderError, classify_exception, status_to_code
from ..http import Exchange, HttpxTransport, Transport
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import ChatMessage
from ..timeouts import SessionTimer, TimerFactory
from .decoder import ChunkDecoder, DecodedRecord
from .stream_controller import StreamController
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics

if TYPE_CHECKING:
    from ..interfaces import ProviderAdapter


class SessionState(str, Enum):
    IDLE = "idle"
    SENT = "sent"
    RECEIVING = "receiving"
    COMPLETED = "completed"
    ERRORED = "errored"
    ABORTED = "aborted"


TERMINAL_STATES = frozenset({SessionState.COMPLETED, SessionState.ERRORED, SessionState.ABORTED})

OnToken = Callable[[str], None]
OnDone = Callable[[], None]
OnError = Callable[[str], None]
Spawner = Callable[[Callable[[], None]], None]
CancelHandle = Callable[[], None]


class _Callbacks(NamedTuple):
    on_token: OnToken
    on_done: OnDone
    on_error: OnError


def thread_spawner(target: Callable[[], None]) -> None:
    """Run ``target`` on a new daemon thread."""
    threading.Thread(target=target, name="vault-chat-stream", daemon=True).start()


def _noop() -> None:
    return None


class StreamSession:
    """One chat request streamed through a provider adapter.

    Parameters:
        adapter: Provider strategy (request shape, framing, error wording).
        transport: Exchange factory; defaults to :class:`HttpxTransport`.
        timer_factory: Timer factory for the idle timeout (injectable for tests).
        spawn: Runs the blocking exchange loop; defaults to a daemon thread.
        timeout_seconds: Idle timeout; defaults to ``adapter.timeout_seconds``.
        token: Cancellation token; cancelling it cancels the session.
        session_id: Identifier attached to log events.
        logger: Logger; defaults to ``vault_chat.stream``.

    A session is single-use: ``start`` (or ``stream``) may be called once.
    """

    def __init__(
        self,
        adapter: "ProviderAdapter",
        *,
        transport: Optional[Transport] = None,
        timer_factory: Optional[TimerFactory] = None,
        spawn: Optional[Spawner] = None,
        timeout_seconds: Optional[float] = None,
        token: Optional[CancellationToken] = None,
        session_id: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._adapter = adapter
        self._transport: Transport = transport if transport is not None else HttpxTransport()
        self._timer_factory = timer_factory
        self._spawn: Spawner = spawn or thread_spawner
        self._timeout = timeout_seconds if timeout_seconds else adapter.timeout_seconds
        self._token = token if token is not None else CancellationToken()
        self._session_id = session_id
        self._logger = logger or get_logger("stream")

        self._state = SessionState.IDLE
        self._aborted = False
        self._started = False
        self._state_lock = threading.Lock()
        self._emit_lock = threading.RLock()
        self._terminal_listeners: List[Callable[["StreamSession"], None]] = []

        self._callbacks: Optional[_Callbacks] = None
        self._model: Optional[str] = None
        self._ctx: Optional[LogContext] = None
        self._decoder: Optional[ChunkDecoder] = None
        self._exchange: Optional[Exchange] = None
        self._timer: Optional[SessionTimer] = None
        self._started_at: Optional[float] = None
        self._metrics = StreamMetrics()

    # Introspection -------------------------------------------------------
    @property
    def adapter(self) -> "ProviderAdapter":
        return self._adapter

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def finished(self) -> bool:
        """Whether the session reached a terminal state."""
        return self._state in TERMINAL_STATES

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    @property
    def model(self) -> Optional[str]:
        return self._model

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def metrics(self) -> StreamMetrics:
        return self._metrics

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None and self._timer.pending

    @property
    def buffer(self) -> str:
        """Undecoded tail held by the decoder (empty before start)."""
        return self._decoder.buffer if self._decoder is not None else ""

    def add_terminal_listener(self, listener: Callable[["StreamSession"], None]) -> None:
        """Call ``listener(session)`` once the session is finished or cancelled.

        Runs immediately when the session already finished. Listeners are
        infrastructure hooks (registry cleanup, iterator wake-up) and run after
        the terminal user callback.
        """
        with self._state_lock:
            if self._state not in TERMINAL_STATES:
                self._terminal_listeners.append(listener)
                return
        listener(self)

    # Public API ----------------------------------------------------------
    def start(
        self,
        messages: Iterable[ChatMessage],
        model: Optional[str],
        on_token: OnToken,
        on_done: OnDone,
        on_error: OnError,
    ) -> CancelHandle:
        """Issue the request and return the cancel handle.

        A missing credential (or any other ``ProviderError`` raised while
        building the request) is reported through ``on_error`` before this
        method returns; no request is sent and the returned handle is a
        no-op.
        """
        with self._state_lock:
            if self._started:
                raise RuntimeError("stream session already started")
            self._started = True
            cancelled_early = self._aborted
        self._callbacks = _Callbacks(on_token, on_done, on_error)
        if cancelled_early:
            return _noop

        self._model = model or self._adapter.default_model()
        self._ctx = LogContext(
            provider=self._adapter.provider_name,
            model=self._model,
            session_id=self._session_id,
        )
        self._started_at = time.monotonic()
        try:
            credential = self._adapter.resolve_credentials()
            request = self._adapter.build_request(list(messages), self._model, credential=credential)
        except ProviderError as e:
            self._finish(SessionState.ERRORED, e.message, e.code)
            return _noop

        self._decoder = ChunkDecoder(self._adapter.framing, logger=self._logger, ctx=self._ctx)
        self._exchange = self._transport.exchange(request, timeout_seconds=self._timeout)
        self._timer = SessionTimer(self._timeout, self._on_timeout, factory=self._timer_factory)
        with self._state_lock:
            cancelled_early = self._aborted
            if not cancelled_early:
                self._state = SessionState.SENT
        if cancelled_early:
            # cancelled from another thread while the request was being built
            self._release()
            return _noop

        normalized_log_event(
            self._logger,
            "stream.start",
            self._ctx,
            phase="start",
            emitted=False,
            tokens=None,
            url=request.url,
            headers=request.redacted_headers(),
            timeout_seconds=self._timeout,
        )
        self._timer.arm()
        self._token.on_cancel(self.cancel)
        if self._closed:
            self._release()
            return _noop
        self._spawn(self._run)
        return self.cancel

    def stream(self, messages: Iterable[ChatMessage], model: Optional[str] = None) -> StreamController:
        """Start the session and return a pull-style event iterator."""
        controller = StreamController(self)
        self.start(messages, model, controller.on_token, controller.on_done, controller.on_error)
        return controller

    def cancel(self, reason: Optional[str] = None) -> None:
        """Abort the session without invoking any further callback.

        Idempotent, and safe from any thread including from inside a
        callback. Returns without waiting for the connection teardown to be
        confirmed by the peer. A token callback already running on the
        worker may still complete after this returns; none follows it.
        """
        with self._state_lock:
            if self._aborted or self._state in TERMINAL_STATES:
                return
            self._aborted = True
            was_started = self._state is not SessionState.IDLE
            self._state = SessionState.ABORTED
        self._release()
        if was_started:
            self._metrics.total_duration_ms = self._elapsed_ms()
            finalize_stream(
                logger=self._logger,
                ctx=self._ctx,
                outcome="cancelled",
                metrics=self._metrics,
                reason=reason,
            )
        self._notify_terminal()

    # Worker --------------------------------------------------------------
    @property
    def _closed(self) -> bool:
        return self._aborted or self._state in TERMINAL_STATES

    def _run(self) -> None:
        exchange = self._exchange
        if exchange is None or self._closed:
            return
        try:
            exchange.send()
            if self._closed:
                return
            status = exchange.status_code
            if status != 200:
                self._on_http_error(exchange, status)
                return
            for chunk in exchange.iter_chunks():
                if not self._on_data(chunk):
                    return
            self._on_end()
        except Exception as exc:  # transport failures surface through on_error
            if self._closed:
                # the connection was closed by cancel/timeout/terminal record
                return
            code = classify_exception(exc)
            if code is ErrorCode.TIMEOUT:
                # transport backstop expired before the session timer
                self._finish(SessionState.ABORTED, self._adapter.timeout_message(), code)
                return
            self._finish(
                SessionState.ERRORED,
                self._adapter.classify_transport_error(exc),
                code,
            )

    def _on_http_error(self, exchange: Exchange, status: int) -> None:
        body: Optional[bytes] = None
        if self._adapter.drains_error_body:
            try:
                body = exchange.read()
            except Exception as exc:  # status text is still reported
                normalized_log_event(
                    self._logger,
                    "stream.drain_error",
                    self._ctx,
                    phase="start",
                    level=logging.DEBUG,
                    emitted=False,
                    tokens=None,
                    status=status,
                    error=repr(exc),
                )
        if self._closed:
            return
        message = self._adapter.classify_http_status(status, body, model=self._model)
        self._finish(SessionState.ERRORED, message or f"HTTP {status}", status_to_code(status))

    def _on_data(self, fragment: bytes) -> bool:
        """Feed one fragment; return False once no further data is wanted."""
        with self._emit_lock:
            if self._closed:
                return False
            with self._state_lock:
                if self._state is SessionState.SENT:
                    self._state = SessionState.RECEIVING
            self._timer.arm()
            return self._dispatch(self._decoder.feed(fragment))

    def _on_end(self) -> None:
        with self._emit_lock:
            if self._closed:
                return
            # a server may close without a terminal record
            if self._dispatch(self._decoder.flush()):
                self._finish(SessionState.COMPLETED)

    def _dispatch(self, records: List[DecodedRecord]) -> bool:
        for record in records:
            self._metrics.records += 1
            text = self._adapter.extract_token(record)
            if text is not None and not self._emit_token(text):
                return False
            if self._adapter.is_terminal(record):
                self._finish(SessionState.COMPLETED)
                return False
        return not self._closed

    def _emit_token(self, text: str) -> bool:
        if self._closed:
            return False
        if self._metrics.emitted == 0:
            self._metrics.time_to_first_token_ms = self._elapsed_ms()
        self._metrics.emitted += 1
        self._invoke(self._callbacks.on_token, text)
        return not self._closed

    def _on_timeout(self) -> None:
        with self._emit_lock:
            if self._closed or self.timer_pending:
                # finished, or re-armed by data that raced the expiry
                return
            self._finish(SessionState.ABORTED, self._adapter.timeout_message(), ErrorCode.TIMEOUT)

    # Terminal transitions ------------------------------------------------
    def _finish(
        self,
        target: SessionState,
        message: Optional[str] = None,
        code: Optional[ErrorCode] = None,
    ) -> bool:
        with self._emit_lock:
            with self._state_lock:
                if self._aborted or self._state in TERMINAL_STATES:
                    return False
                self._state = target
                if target is SessionState.ABORTED:
                    self._aborted = True
            self._release()
            self._metrics.total_duration_ms = self._elapsed_ms()
            finalize_stream(
                logger=self._logger,
                ctx=self._ctx,
                outcome=target.value,
                metrics=self._metrics,
                error=message,
                error_code=code.value if code is not None else None,
            )
            if target is SessionState.COMPLETED:
                self._invoke(self._callbacks.on_done)
            else:
                self._invoke(self._callbacks.on_error, message)
        self._notify_terminal()
        return True

    def _release(self) -> None:
        if self._timer is not None:
            self._timer.clear()
        exchange = self._exchange
        if exchange is None:
            return
        try:
            exchange.close()
        except Exception as exc:  # pragma: no cover - close is best effort
            normalized_log_event(
                self._logger,
                "stream.close_error",
                self._ctx,
                phase="finalize",
                level=logging.DEBUG,
                emitted=self._metrics.emitted > 0,
                tokens=None,
                error=repr(exc),
            )

    def _notify_terminal(self) -> None:
        with self._state_lock:
            listeners = self._terminal_listeners
            self._terminal_listeners = []
        for listener in listeners:
            self._invoke(listener, self)

    def _invoke(self, callback: Optional[Callable[..., None]], *args) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as exc:
            normalized_log_event(
                self._logger,
                "stream.callback_error",
                self._ctx,
                phase="callback",
                level=logging.ERROR,
                emitted=self._metrics.emitted > 0,
                tokens=None,
                callback=getattr(callback, "__name__", repr(callback)),
                error=repr(exc),
            )

    def _elapsed_ms(self) -> Optional[float]:
        if self._started_at is None:
            return None
        return round((time.monotonic() - self._started_at) * 1000.0, 3)


__all__ = [
    "SessionState",
    "TERMINAL_STATES",
    "StreamSession",
    "CancelHandle",
    "Spawner",
    "thread_spawner",
]

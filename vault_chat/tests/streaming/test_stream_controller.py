"""Tests for the pull-style ``StreamController`` returned by ``StreamSession.stream``."""
from __future__ import annotations

import threading

import pytest

from vault_chat.base.cancellation import CancelledError
from vault_chat.base.streaming import EventKind, SessionState, StreamSession

BODY = (
    b'{"message":{"content":"a"},"done":false}\n'
    b'{"message":{"content":"b"},"done":false}\n'
    b'{"message":{"content":""},"done":true}\n'
)


def test_iterates_tokens_then_done(ollama_adapter, fake_transport_cls, timers, inline, user_messages):
    session = StreamSession(ollama_adapter, transport=fake_transport_cls(chunks=[BODY]), timer_factory=timers, spawn=inline)
    controller = session.stream(user_messages)

    events = list(controller)
    assert [e.kind for e in events] == [EventKind.TOKEN, EventKind.TOKEN, EventKind.DONE]  # nosec B101
    assert [e.text for e in events[:2]] == ["a", "b"]  # nosec B101
    assert controller.finished  # nosec B101
    assert controller.terminal_event is events[-1]  # nosec B101
    assert controller.error is None  # nosec B101


def test_error_event_ends_iteration(ollama_adapter, fake_transport_cls, timers, inline, user_messages):
    session = StreamSession(ollama_adapter, transport=fake_transport_cls(status=500), timer_factory=timers, spawn=inline)
    controller = session.stream(user_messages)

    events = list(controller)
    assert len(events) == 1 and events[0].kind is EventKind.ERROR  # nosec B101
    assert controller.error == "Ollama server error. Please check if Ollama is running correctly."  # nosec B101


def test_result_accumulates_text(ollama_adapter, fake_transport_cls, timers, inline, user_messages):
    session = StreamSession(ollama_adapter, transport=fake_transport_cls(chunks=[BODY]), timer_factory=timers, spawn=inline)
    result = session.stream(user_messages).result()
    assert result.ok and result.text == "ab" and result.token_count == 2  # nosec B101


def test_controller_is_single_use(ollama_adapter, fake_transport_cls, timers, inline, user_messages):
    session = StreamSession(ollama_adapter, transport=fake_transport_cls(chunks=[BODY]), timer_factory=timers, spawn=inline)
    controller = session.stream(user_messages)
    list(controller)
    with pytest.raises(RuntimeError):
        iter(controller)


def test_cancel_ends_iteration_without_terminal_event(ollama_adapter, fake_transport_cls, timers, deferred, user_messages):
    session = StreamSession(ollama_adapter, transport=fake_transport_cls(chunks=[BODY]), timer_factory=timers, spawn=deferred)
    controller = session.stream(user_messages)
    controller.cancel("stop")
    deferred.run_all()

    assert list(controller) == []  # nosec B101
    assert controller.cancelled and controller.terminal_event is None  # nosec B101
    assert session.state is SessionState.ABORTED  # nosec B101


def test_result_raises_when_cancelled(ollama_adapter, fake_transport_cls, timers, deferred, user_messages):
    session = StreamSession(ollama_adapter, transport=fake_transport_cls(chunks=[BODY]), timer_factory=timers, spawn=deferred)
    controller = session.stream(user_messages)
    controller.cancel()
    with pytest.raises(CancelledError):
        controller.result()


class _GatedTransport:
    """Delivers the first fragment, then blocks until released or closed."""

    def __init__(self, first: bytes, rest: bytes) -> None:
        self.first = first
        self.rest = rest
        self.gate = threading.Event()
        self.exchange_obj = None

    def exchange(self, request, *, timeout_seconds):
        transport = self

        class _Exchange:
            status_code = 200
            closed = False

            def send(self):
                return None

            def iter_chunks(self):
                yield transport.first
                transport.gate.wait(5)
                if self.closed:
                    raise ConnectionResetError("closed")
                yield transport.rest

            def read(self):
                return b""

            def close(self):
                self.closed = True

        self.exchange_obj = _Exchange()
        return self.exchange_obj


def test_consumer_stopping_early_cancels_session(ollama_adapter, timers, user_messages):
    transport = _GatedTransport(b'{"message":{"content":"a"}}\n', b'{"done":true}\n')
    session = StreamSession(ollama_adapter, transport=transport, timer_factory=timers)
    controller = session.stream(user_messages)

    it = iter(controller)
    first = next(it)
    assert first.text == "a"  # nosec B101
    it.close()
    transport.gate.set()

    assert session.state is SessionState.ABORTED  # nosec B101
    assert transport.exchange_obj.closed  # nosec B101

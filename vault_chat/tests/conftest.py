"""Shared fixtures for the vault_chat test suite.

Provides deterministic stand-ins for the three sources of nondeterminism in a
stream session: the network (``FakeTransport``), the clock
(``ManualTimerFactory``) and the worker thread (inline or deferred spawners).
Environment variables that feed configuration are cleared for every test.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional, Sequence

import pytest

from vault_chat.base.http import HttpRequest
from vault_chat.config import reset_config_cache

_ISOLATED_ENV = (
    "OPENAI_API_KEY",
    "VAULT_CHAT_OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "OPENAI_TIMEOUT",
    "OLLAMA_HOST",
    "OLLAMA_MODEL",
    "OLLAMA_TIMEOUT",
    "VAULT_CHAT_CONFIG_FILE",
    "VAULT_CHAT_TIMEOUT_LOCAL_SECONDS",
    "VAULT_CHAT_TIMEOUT_HOSTED_SECONDS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Clear config-related env vars and point ``.env`` loading at nothing."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


class FakeExchange:
    """Scripted exchange: status, body fragments and optional failures."""

    def __init__(
        self,
        request: HttpRequest,
        timeout_seconds: float,
        *,
        status: int = 200,
        chunks: Sequence[bytes] = (),
        body: bytes = b"",
        send_error: Optional[BaseException] = None,
        stream_error: Optional[BaseException] = None,
    ) -> None:
        self.request = request
        self.timeout_seconds = timeout_seconds
        self._status = status
        self.chunks = list(chunks)
        self.body = body
        self.send_error = send_error
        self.stream_error = stream_error
        self.sent = False
        self.body_read = False
        self.closed = False
        self.close_calls = 0
        self.chunks_delivered = 0

    @property
    def status_code(self) -> int:
        return self._status

    def send(self) -> None:
        if self.closed:
            raise ConnectionResetError("exchange closed")
        if self.send_error is not None:
            raise self.send_error
        self.sent = True

    def iter_chunks(self) -> Iterator[bytes]:
        for chunk in self.chunks:
            if self.closed:
                raise ConnectionResetError("exchange closed")
            self.chunks_delivered += 1
            yield chunk
        if self.stream_error is not None:
            raise self.stream_error

    def read(self) -> bytes:
        self.body_read = True
        return self.body

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakeTransport:
    """Transport returning one scripted :class:`FakeExchange` per request."""

    def __init__(self, **exchange_kwargs: Any) -> None:
        self.exchange_kwargs = exchange_kwargs
        self.exchanges: List[FakeExchange] = []

    def exchange(self, request: HttpRequest, *, timeout_seconds: float) -> FakeExchange:
        ex = FakeExchange(request, timeout_seconds, **self.exchange_kwargs)
        self.exchanges.append(ex)
        return ex

    @property
    def last(self) -> FakeExchange:
        return self.exchanges[-1]


class ManualTimer:
    def __init__(self, seconds: float, callback: Callable[[], None]) -> None:
        self.seconds = seconds
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        """Expire now (a cancelled timer never fires)."""
        if not self.cancelled:
            self.callback()


class ManualTimerFactory:
    """Timer factory whose timers only fire when a test says so."""

    def __init__(self) -> None:
        self.timers: List[ManualTimer] = []

    def __call__(self, seconds: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(seconds, callback)
        self.timers.append(timer)
        return timer

    @property
    def latest(self) -> ManualTimer:
        return self.timers[-1]

    @property
    def active(self) -> List[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]


class DeferredSpawner:
    """Collect worker targets so a test decides when the exchange runs."""

    def __init__(self) -> None:
        self.targets: List[Callable[[], None]] = []

    def __call__(self, target: Callable[[], None]) -> None:
        self.targets.append(target)

    def run_all(self) -> None:
        targets, self.targets = self.targets, []
        for target in targets:
            target()


def inline_spawn(target: Callable[[], None]) -> None:
    target()


class Recorder:
    """Callback sink recording every session callback in order."""

    def __init__(self) -> None:
        self.events: List[tuple] = []
        self.on_token_hook: Optional[Callable[[str], None]] = None

    def on_token(self, text: str) -> None:
        self.events.append(("token", text))
        if self.on_token_hook is not None:
            self.on_token_hook(text)

    def on_done(self) -> None:
        self.events.append(("done",))

    def on_error(self, message: str) -> None:
        self.events.append(("error", message))

    @property
    def tokens(self) -> List[str]:
        return [e[1] for e in self.events if e[0] == "token"]

    @property
    def text(self) -> str:
        return "".join(self.tokens)

    @property
    def terminals(self) -> List[tuple]:
        return [e for e in self.events if e[0] != "token"]

    def start(self, session, messages, model: Optional[str] = None):
        return session.start(messages, model, self.on_token, self.on_done, self.on_error)


@pytest.fixture()
def fake_transport_cls():
    return FakeTransport


@pytest.fixture()
def timers() -> ManualTimerFactory:
    return ManualTimerFactory()


@pytest.fixture()
def deferred() -> DeferredSpawner:
    return DeferredSpawner()


@pytest.fixture()
def inline():
    return inline_spawn


@pytest.fixture()
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture()
def recorder_cls():
    return Recorder


@pytest.fixture()
def user_messages():
    from vault_chat.base.models import ChatMessage

    return [ChatMessage(role="user", content="Hello")]


@pytest.fixture()
def ollama_adapter():
    from vault_chat.ollama import OllamaAdapter

    return OllamaAdapter(host="http://localhost:11434", model="llama3.2")


@pytest.fixture()
def openai_adapter(monkeypatch: pytest.MonkeyPatch):
    from vault_chat.openai import OpenAIAdapter

    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-123")
    return OpenAIAdapter()

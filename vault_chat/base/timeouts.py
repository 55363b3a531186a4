"""Unified timeout utilities for stream sessions.

This module centralizes the timeout values used by provider adapters and the
stream session, and provides the single-timer primitive a session owns while
it is open.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values (seconds). The local-server
    and hosted-API defaults are 60 and 120 seconds respectively.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use (and again whenever the relevant variables change). Supported
    environment variables (all optional):
        VAULT_CHAT_TIMEOUT_LOCAL_SECONDS
        VAULT_CHAT_TIMEOUT_HOSTED_SECONDS

SessionTimer
    Owns at most one pending ``threading.Timer``-like handle. ``arm`` replaces
    any pending timer, ``clear`` cancels it. The timer factory is injectable
    so tests can fire timeouts deterministically.

Failure Modes
-------------
The timer never raises into the guarded code; expiry only invokes the
callback supplied by the session, which decides whether the expiry is still
relevant.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
import threading
from typing import Callable, Optional, Protocol

from ..config.defaults import HOSTED_TIMEOUT_SECONDS, LOCAL_TIMEOUT_SECONDS


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        local_timeout_seconds: Idle timeout for the local-server variant.
        hosted_timeout_seconds: Idle timeout for the hosted-API variant.
    """

    local_timeout_seconds: float = LOCAL_TIMEOUT_SECONDS
    hosted_timeout_seconds: float = HOSTED_TIMEOUT_SECONDS


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None

_ENV_NAMES = (
    "VAULT_CHAT_TIMEOUT_LOCAL_SECONDS",
    "VAULT_CHAT_TIMEOUT_HOSTED_SECONDS",
)


def _parse_env_float(name: str, default: float) -> float:
    """Parse an environment variable as a positive float with a fallback default."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:  # pragma: no cover - defensive
        return default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance.

    The cache is refreshed when any of the supported environment variables
    changed since the last computation, so tests can adjust them at runtime.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    cur_guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED

    _CACHED = TimeoutConfig(
        local_timeout_seconds=_parse_env_float("VAULT_CHAT_TIMEOUT_LOCAL_SECONDS", LOCAL_TIMEOUT_SECONDS),
        hosted_timeout_seconds=_parse_env_float("VAULT_CHAT_TIMEOUT_HOSTED_SECONDS", HOSTED_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


class TimerHandle(Protocol):
    """Minimal handle returned by a timer factory."""

    def cancel(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def thread_timer_factory(seconds: float, callback: Callable[[], None]) -> TimerHandle:
    """Start and return a daemon ``threading.Timer`` invoking ``callback``."""
    timer = threading.Timer(seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


class SessionTimer:
    """Single pending timeout owned by one stream session.

    Each ``arm`` call cancels the previous handle before creating a new one,
    so at most one timer is pending at any time. Expiry of a superseded timer
    is ignored through a generation counter.
    """

    def __init__(
        self,
        seconds: float,
        on_expire: Callable[[], None],
        *,
        factory: Optional[TimerFactory] = None,
    ) -> None:
        self._seconds = seconds
        self._on_expire = on_expire
        self._factory = factory or thread_timer_factory
        self._lock = threading.Lock()
        self._handle: Optional[TimerHandle] = None
        self._generation = 0

    @property
    def seconds(self) -> float:
        return self._seconds

    @property
    def pending(self) -> bool:
        """Whether a timer is currently armed."""
        return self._handle is not None

    def arm(self) -> None:
        """(Re)start the countdown, replacing any pending timer."""
        with self._lock:
            previous = self._handle
            self._generation += 1
            generation = self._generation
            self._handle = None
        if previous is not None:
            previous.cancel()
        handle = self._factory(self._seconds, lambda: self._fire(generation))
        with self._lock:
            if self._generation == generation:
                self._handle = handle
                return
        # cleared or re-armed while the factory ran
        handle.cancel()

    def clear(self) -> None:
        """Cancel the pending timer, if any. Idempotent."""
        with self._lock:
            handle = self._handle
            self._handle = None
            self._generation += 1
        if handle is not None:
            handle.cancel()

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
            self._generation += 1
        self._on_expire()


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "TimerHandle",
    "TimerFactory",
    "thread_timer_factory",
    "SessionTimer",
]

"""Unit tests for timeout configuration and the single-pending ``SessionTimer``."""
from __future__ import annotations

import threading

from vault_chat.base.timeouts import SessionTimer, TimeoutConfig, get_timeout_config


def test_defaults():
    cfg = get_timeout_config()
    assert cfg == TimeoutConfig()  # nosec B101
    assert cfg.local_timeout_seconds == 60.0  # nosec B101
    assert cfg.hosted_timeout_seconds == 120.0  # nosec B101


def test_env_overrides_refresh_cache(monkeypatch):
    first = get_timeout_config()
    monkeypatch.setenv("VAULT_CHAT_TIMEOUT_LOCAL_SECONDS", "15")
    monkeypatch.setenv("VAULT_CHAT_TIMEOUT_HOSTED_SECONDS", "bogus")
    cfg = get_timeout_config()
    assert cfg is not first  # nosec B101
    assert cfg.local_timeout_seconds == 15.0  # nosec B101
    assert cfg.hosted_timeout_seconds == 120.0  # nosec B101
    assert get_timeout_config() is cfg  # nosec B101


def test_non_positive_env_value_falls_back(monkeypatch):
    monkeypatch.setenv("VAULT_CHAT_TIMEOUT_LOCAL_SECONDS", "-3")
    assert get_timeout_config().local_timeout_seconds == 60.0  # nosec B101


def test_arm_replaces_pending_timer(timers):
    fired = []
    timer = SessionTimer(30.0, lambda: fired.append(1), factory=timers)
    timer.arm()
    timer.arm()
    assert len(timers.timers) == 2  # nosec B101
    assert timers.timers[0].cancelled and not timers.timers[1].cancelled  # nosec B101
    assert timer.pending  # nosec B101

    timers.timers[0].callback()  # stale expiry
    assert fired == []  # nosec B101
    timers.latest.fire()
    assert fired == [1]  # nosec B101
    assert not timer.pending  # nosec B101


def test_clear_is_idempotent(timers):
    timer = SessionTimer(1.0, lambda: None, factory=timers)
    timer.clear()
    timer.arm()
    timer.clear()
    timer.clear()
    assert not timer.pending and timers.active == []  # nosec B101


def test_thread_timer_fires():
    expired = threading.Event()
    timer = SessionTimer(0.01, expired.set)
    timer.arm()
    assert expired.wait(2.0)  # nosec B101
    assert not timer.pending  # nosec B101

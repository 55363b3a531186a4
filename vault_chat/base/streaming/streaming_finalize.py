"""Finalize helper for stream sessions.

Keeps the consolidated end-of-stream log line in one place so every terminal
transition (completed, errored, timed out, cancelled) reports the same keys.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from ..logging import LogContext, normalized_log_event
from .streaming_metrics import StreamMetrics

_EVENT_BY_OUTCOME = {
    "completed": "stream.end",
    "errored": "stream.error",
    "aborted": "stream.error",
    "cancelled": "stream.cancelled",
}


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: Optional[LogContext],
    outcome: str,
    metrics: StreamMetrics,
    error: Optional[str] = None,
    error_code: Optional[str] = None,
    **extra_fields: Any,
) -> None:
    """Emit the normalized finalize event for a session.

    ``outcome`` is the terminal state name (or ``"cancelled"``). Failures are
    logged at WARNING, clean completions and cancellations at INFO.
    """
    level = logging.WARNING if error is not None else logging.INFO
    normalized_log_event(
        logger,
        _EVENT_BY_OUTCOME.get(outcome, "stream.end"),
        ctx,
        phase="finalize",
        level=level,
        emitted=metrics.emitted > 0,
        tokens=None,
        error_code=error_code,
        outcome=outcome,
        error=error,
        **metrics.as_dict(),
        **extra_fields,
    )


__all__ = ["finalize_stream"]

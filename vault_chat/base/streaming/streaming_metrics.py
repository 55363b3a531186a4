"""Streaming metrics data structures.

Collected by the stream session and reported in its finalize log event.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class StreamMetrics:
    """Counters for a single stream session.

    Attributes:
        emitted: Number of tokens delivered to ``on_token``.
        records: Number of decoded records (including control frames).
        time_to_first_token_ms: Latency until the first token, if any.
        total_duration_ms: Latency until the terminal transition.
    """

    emitted: int = 0
    records: int = 0
    time_to_first_token_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "emitted_count": self.emitted,
            "record_count": self.records,
            "time_to_first_token_ms": self.time_to_first_token_ms,
            "total_duration_ms": self.total_duration_ms,
        }


__all__ = ["StreamMetrics"]

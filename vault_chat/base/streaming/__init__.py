"""Streaming package: decoder, events, session and controller.

Import from here for the stable public surface; the submodules are
implementation detail.
"""

from .decoder import DONE_SENTINEL, SSE_DATA_PREFIX, ChunkDecoder, DecodedRecord, Framing, decode_all
from .streaming import ChatResult, EventKind, StreamEvent, accumulate_events
from .streaming_metrics import StreamMetrics
from .streaming_finalize import finalize_stream
from .stream_controller import StreamController
from .session import (
    TERMINAL_STATES,
    CancelHandle,
    SessionState,
    Spawner,
    StreamSession,
    thread_spawner,
)

__all__ = [
    "DONE_SENTINEL",
    "SSE_DATA_PREFIX",
    "ChunkDecoder",
    "DecodedRecord",
    "Framing",
    "decode_all",
    "ChatResult",
    "EventKind",
    "StreamEvent",
    "accumulate_events",
    "StreamMetrics",
    "finalize_stream",
    "StreamController",
    "TERMINAL_STATES",
    "CancelHandle",
    "SessionState",
    "Spawner",
    "StreamSession",
    "thread_spawner",
]

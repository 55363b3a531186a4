"""Incremental line decoder for streamed chat responses.

Purpose:
    Turn an unbounded sequence of arbitrary-length fragments into complete
    logical records for one of two line-oriented framings:

    - ``Framing.NDJSON``: every line is one JSON object.
    - ``Framing.SSE``: lines start with ``data: ``; the payload is either the
      ``[DONE]`` sentinel or one JSON object. Other lines are ignored.

Algorithm:
    The fragment is appended to an internal buffer which is split on ``\\n``.
    All pieces but the last are complete candidate lines; the last piece
    (possibly empty) becomes the new buffer. ``flush`` treats the remaining
    buffer as one final candidate line.

Failure semantics:
    Malformed JSON never raises; the offending line is dropped (and logged at
    DEBUG) so one corrupt line cannot abort an otherwise healthy stream.

Encoding:
    ``bytes`` fragments pass through an incremental UTF-8 decoder, so a
    multi-byte character split across two reads is reassembled before any
    line splitting happens.
"""

from __future__ import annotations

import codecs
import json
import logging
from enum import Enum
from typing import Any, List, Optional, Union

from ..logging import LogContext, normalized_log_event


class Framing(str, Enum):
    """Wire framing of a streamed response body."""

    NDJSON = "ndjson"
    SSE = "sse"


class _DoneSentinel:
    """Marker record for the SSE ``data: [DONE]`` line."""

    _instance: Optional["_DoneSentinel"] = None

    def __new__(cls) -> "_DoneSentinel":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return "DONE_SENTINEL"


DONE_SENTINEL = _DoneSentinel()

SSE_DATA_PREFIX = "data: "
SSE_DONE_PAYLOAD = "[DONE]"

DecodedRecord = Any


class ChunkDecoder:
    """Stateful fragment-to-record decoder owned by exactly one session.

    Parameters:
        framing: Line framing of the body.
        logger: Optional logger for ``stream.decode_error`` debug events.
        ctx: Optional log context attached to those events.
    """

    def __init__(
        self,
        framing: Framing,
        *,
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self.framing = Framing(framing)
        self._buffer = ""
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._finished = False
        self._logger = logger
        self._ctx = ctx

    @property
    def buffer(self) -> str:
        """Unflushed tail of the stream (may be empty or a partial line)."""
        return self._buffer

    @property
    def finished(self) -> bool:
        return self._finished

    def feed(self, fragment: Union[str, bytes]) -> List[DecodedRecord]:
        """Append ``fragment`` and return the records it completed, in order."""
        if self._finished:
            raise RuntimeError("decoder already flushed")
        text = self._utf8.decode(fragment) if isinstance(fragment, (bytes, bytearray)) else fragment
        if not text:
            return []
        self._buffer += text
        *lines, self._buffer = self._buffer.split("\n")
        records: List[DecodedRecord] = []
        for line in lines:
            self._extract(line, records)
        return records

    def flush(self) -> List[DecodedRecord]:
        """Decode whatever is left as one final line and finish the decoder."""
        if self._finished:
            return []
        tail = self._buffer + self._utf8.decode(b"", final=True)
        self._buffer = ""
        self._finished = True
        records: List[DecodedRecord] = []
        self._extract(tail, records)
        return records

    def _extract(self, line: str, out: List[DecodedRecord]) -> None:
        candidate = line.strip()
        if not candidate:
            return
        if self.framing is Framing.SSE:
            # prefix is matched after trimming, so "\r\n" endings are tolerated
            if not candidate.startswith(SSE_DATA_PREFIX):
                return
            candidate = candidate[len(SSE_DATA_PREFIX):].strip()
            if candidate == SSE_DONE_PAYLOAD:
                out.append(DONE_SENTINEL)
                return
            if not candidate:
                return
        try:
            out.append(json.loads(candidate))
        except json.JSONDecodeError as e:
            self._log_decode_error(e, candidate)

    def _log_decode_error(self, error: json.JSONDecodeError, line: str) -> None:
        if self._logger is None or not self._logger.isEnabledFor(logging.DEBUG):
            return
        normalized_log_event(
            self._logger,
            "stream.decode_error",
            self._ctx,
            phase="mid_stream",
            level=logging.DEBUG,
            error=str(error),
            line=line[:200],
        )


def decode_all(framing: Framing, data: Union[str, bytes]) -> List[DecodedRecord]:
    """Decode a complete body in one step (reference for fragmented decoding)."""
    decoder = ChunkDecoder(framing)
    return decoder.feed(data) + decoder.flush()


__all__ = [
    "Framing",
    "ChunkDecoder",
    "DecodedRecord",
    "DONE_SENTINEL",
    "SSE_DATA_PREFIX",
    "decode_all",
]

"""Unit tests for the incremental chunk decoder.

Covers fragmentation transparency for both framings, split UTF-8 sequences,
malformed-line tolerance, the SSE ``[DONE]`` sentinel and flush semantics.
"""
from __future__ import annotations

import json
import logging

import pytest

from vault_chat.base.streaming import DONE_SENTINEL, ChunkDecoder, Framing, decode_all

NDJSON_BODY = (
    '{"message":{"content":"Hel"},"done":false}\n'
    '{"message":{"content":"lo"},"done":false}\n'
    '{"message":{"content":"!"},"done":true}\n'
).encode("utf-8")

SSE_BODY = (
    'data: {"choices":[{"delta":{"content":"Hi"}}]}\n\n'
    'data: {"choices":[{"delta":{"content":" there"}}]}\n\n'
    "data: [DONE]\n\n"
).encode("utf-8")


def _decode_in_pieces(framing: Framing, body: bytes, sizes) -> list:
    decoder = ChunkDecoder(framing)
    out: list = []
    pos = 0
    for size in sizes:
        out.extend(decoder.feed(body[pos:pos + size]))
        pos += size
    out.extend(decoder.feed(body[pos:]))
    out.extend(decoder.flush())
    return out


@pytest.mark.parametrize("framing,body", [(Framing.NDJSON, NDJSON_BODY), (Framing.SSE, SSE_BODY)])
def test_byte_at_a_time_matches_whole_body(framing, body):
    expected = decode_all(framing, body)
    assert _decode_in_pieces(framing, body, [1] * len(body)) == expected  # nosec B101


@pytest.mark.parametrize("framing,body", [(Framing.NDJSON, NDJSON_BODY), (Framing.SSE, SSE_BODY)])
def test_every_two_way_split_matches_whole_body(framing, body):
    expected = decode_all(framing, body)
    for cut in range(len(body) + 1):
        assert _decode_in_pieces(framing, body, [cut]) == expected  # nosec B101


def test_ndjson_records_in_order():
    records = decode_all(Framing.NDJSON, NDJSON_BODY)
    assert [r["message"]["content"] for r in records] == ["Hel", "lo", "!"]  # nosec B101
    assert records[-1]["done"] is True  # nosec B101


def test_sse_done_sentinel_and_ignored_lines():
    body = b": keep-alive\nevent: message\ndata: {\"a\": 1}\nid: 7\ndata: [DONE]\n"
    records = decode_all(Framing.SSE, body)
    assert records == [{"a": 1}, DONE_SENTINEL]  # nosec B101


def test_sse_tolerates_crlf_line_endings():
    body = b'data: {"a": 1}\r\n\r\ndata: [DONE]\r\n\r\n'
    assert decode_all(Framing.SSE, body) == [{"a": 1}, DONE_SENTINEL]  # nosec B101


def test_partial_line_stays_buffered_until_newline():
    decoder = ChunkDecoder(Framing.NDJSON)
    assert decoder.feed('{"message":{"con') == []  # nosec B101
    assert decoder.buffer == '{"message":{"con'  # nosec B101
    records = decoder.feed('tent":"x"}}\n')
    assert records == [{"message": {"content": "x"}}]  # nosec B101
    assert decoder.buffer == ""  # nosec B101


def test_multibyte_character_split_across_fragments():
    payload = json.dumps({"message": {"content": "héllo ✓"}}, ensure_ascii=False).encode("utf-8") + b"\n"
    check = "✓".encode("utf-8")
    split_at = payload.index(check) + 1  # inside the three-byte sequence
    decoder = ChunkDecoder(Framing.NDJSON)
    first = decoder.feed(payload[:split_at])
    second = decoder.feed(payload[split_at:])
    assert first == []  # nosec B101
    assert second == [{"message": {"content": "héllo ✓"}}]  # nosec B101


def test_malformed_line_is_skipped_and_stream_continues():
    body = b'{"message":{"content":"a"}}\n{not json}\n{"message":{"content":"b"}}\n'
    records = decode_all(Framing.NDJSON, body)
    assert [r["message"]["content"] for r in records] == ["a", "b"]  # nosec B101


def test_malformed_sse_payload_is_skipped():
    body = b'data: {"a": 1}\ndata: {oops\ndata: {"a": 2}\n'
    assert decode_all(Framing.SSE, body) == [{"a": 1}, {"a": 2}]  # nosec B101


def test_flush_decodes_unterminated_last_line():
    decoder = ChunkDecoder(Framing.NDJSON)
    assert decoder.feed('{"done": true}') == []  # nosec B101
    assert decoder.flush() == [{"done": True}]  # nosec B101
    assert decoder.finished  # nosec B101


def test_flush_is_idempotent_and_feed_after_flush_raises():
    decoder = ChunkDecoder(Framing.SSE)
    decoder.flush()
    assert decoder.flush() == []  # nosec B101
    with pytest.raises(RuntimeError):
        decoder.feed("data: {}\n")


def test_blank_lines_produce_no_records():
    assert decode_all(Framing.NDJSON, "\n\n  \n") == []  # nosec B101


def test_decode_error_logged_at_debug():
    records: list[logging.LogRecord] = []

    class _ListHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    logger = logging.getLogger("vault_chat.tests.decoder")
    logger.setLevel(logging.DEBUG)
    handler = _ListHandler(level=logging.DEBUG)
    logger.addHandler(handler)
    try:
        ChunkDecoder(Framing.NDJSON, logger=logger).feed("{broken\n")
    finally:
        logger.removeHandler(handler)
    assert len(records) == 1  # nosec B101
    payload = json.loads(records[0].getMessage())
    assert payload["event"] == "stream.decode_error"  # nosec B101
    assert payload["line"] == "{broken"  # nosec B101

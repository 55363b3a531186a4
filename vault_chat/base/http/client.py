"""httpx-backed transport for stream sessions.

Purpose
    Provide the default :class:`~vault_chat.base.http.transport.Transport`
    implementation on top of ``httpx``.

External dependencies
    - ``httpx`` for the synchronous streaming HTTP client.

Timeout strategy
    The session timer is authoritative. ``httpx`` gets the same idle timeout
    for connect and reads as a backstop, so a worker thread can never block
    forever on a silent socket. A backstop expiry surfaces as an
    ``httpx.TimeoutException`` which the session reports as its own timeout.

Lifecycle & cleanup
    Every exchange owns a dedicated ``httpx.Client``. Closing the exchange
    closes the response and the client, which tears down its socket even
    when the session is cancelled mid-connect. No pooled client outlives a
    session.
"""

from __future__ import annotations

import threading
from typing import Iterator, Optional

import httpx

from .transport import HttpRequest


class HttpxExchange:
    """A single streamed POST executed with its own ``httpx.Client``."""

    def __init__(
        self,
        request: HttpRequest,
        *,
        timeout_seconds: float,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        timeout = httpx.Timeout(timeout_seconds)
        self._request = request
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._response: Optional[httpx.Response] = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def status_code(self) -> int:
        if self._response is None:
            raise RuntimeError("exchange has not been sent")
        return self._response.status_code

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self) -> None:
        with self._lock:
            if self._closed:
                raise httpx.ReadError("exchange closed before send")
            req = self._client.build_request(
                self._request.method,
                self._request.url,
                headers=dict(self._request.headers),
                json=dict(self._request.body),
            )
        response = self._client.send(req, stream=True)
        with self._lock:
            if not self._closed:
                self._response = response
                return
        # closed while waiting for headers
        response.close()
        raise httpx.ReadError("exchange closed while waiting for response")

    def iter_chunks(self) -> Iterator[bytes]:
        if self._response is None:
            raise RuntimeError("exchange has not been sent")
        yield from self._response.iter_bytes()

    def read(self) -> bytes:
        if self._response is None:
            raise RuntimeError("exchange has not been sent")
        return self._response.read()

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            response = self._response
        try:
            if response is not None:
                response.close()
        finally:
            self._client.close()


class HttpxTransport:
    """Create :class:`HttpxExchange` objects.

    Parameters:
        transport: Optional ``httpx.BaseTransport`` (e.g. ``httpx.MockTransport``
            in tests) used by every exchange's client.
    """

    def __init__(self, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._transport = transport

    def exchange(self, request: HttpRequest, *, timeout_seconds: float) -> HttpxExchange:
        return HttpxExchange(request, timeout_seconds=timeout_seconds, transport=self._transport)


__all__ = ["HttpxExchange", "HttpxTransport"]

"""Transport contract between stream sessions and an HTTP library.

Purpose:
    Keep the stream session independent of any particular HTTP client. A
    session only needs to send one POST, inspect the status, read the body
    incrementally (or drain it for an error message) and close the exchange
    from any thread.

Lifecycle:
    ``Transport.exchange`` performs no I/O; it returns an ``Exchange`` the
    session owns from the start. ``send`` blocks until response headers
    arrive. ``close`` may be called at any time, including while ``send`` or
    ``iter_chunks`` is blocked on another thread, and is idempotent.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Protocol, runtime_checkable


@dataclass(frozen=True)
class HttpRequest:
    """Fully-built provider request.

    Attributes:
        url: Absolute endpoint URL.
        headers: Request headers (credential included when required).
        body: JSON-serialisable mapping sent as the request body.
        method: HTTP method; both providers use POST.
    """

    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Mapping[str, Any] = field(default_factory=dict)
    method: str = "POST"

    def redacted_headers(self) -> Dict[str, str]:
        """Headers safe for logging (``Authorization`` masked)."""
        return {
            k: ("***" if k.lower() == "authorization" else v)
            for k, v in self.headers.items()
        }


@runtime_checkable
class Exchange(Protocol):
    """One in-flight request/response pair."""

    @property
    def status_code(self) -> int:
        """HTTP status; only valid after :meth:`send` returned."""
        ...

    def send(self) -> None:
        """Issue the request and wait for response headers."""
        ...

    def iter_chunks(self) -> Iterator[bytes]:
        """Yield body fragments as they arrive."""
        ...

    def read(self) -> bytes:
        """Drain and return the remaining body."""
        ...

    def close(self) -> None:
        """Release the connection; safe from any thread, idempotent."""
        ...


@runtime_checkable
class Transport(Protocol):
    """Factory for exchanges."""

    def exchange(self, request: HttpRequest, *, timeout_seconds: float) -> Exchange:
        ...


__all__ = ["HttpRequest", "Exchange", "Transport"]

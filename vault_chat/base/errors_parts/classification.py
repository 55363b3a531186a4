"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction, status-to-code mapping, transport-level
connectivity detection for ``httpx`` and OS socket errors, and message-based
heuristics as a fallback.
"""
from __future__ import annotations

import errno
import socket
from typing import Dict, Iterator, Optional

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.CONNECTIVITY,
    503: ErrorCode.CONNECTIVITY,
    504: ErrorCode.TIMEOUT,
}


def status_to_code(status: int) -> ErrorCode:
    """Map an HTTP status to an ``ErrorCode`` (``PROTOCOL`` when unmapped)."""
    return _HTTP_STATUS_MAP.get(status, ErrorCode.PROTOCOL)


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    """Yield ``exc`` followed by its ``__cause__``/``__context__`` ancestors."""
    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def is_connection_refused(exc: BaseException) -> bool:
    """Return True when the exception chain reports a refused connection."""
    for item in _exception_chain(exc):
        if isinstance(item, ConnectionRefusedError):
            return True
        if isinstance(item, OSError) and item.errno == errno.ECONNREFUSED:
            return True
        text = str(item).lower()
        if "econnrefused" in text or "connection refused" in text:
            return True
    return False


def is_name_resolution_failure(exc: BaseException) -> bool:
    """Return True when the host name could not be resolved (``ENOTFOUND``)."""
    for item in _exception_chain(exc):
        if isinstance(item, socket.gaierror):
            return True
        text = str(item).lower()
        if (
            "enotfound" in text
            or "name or service not known" in text
            or "nodename nor servname" in text
            or "getaddrinfo failed" in text
            or "temporary failure in name resolution" in text
        ):
            return True
    return False


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without richer type info."""
    PATTERN_GROUPS = (
        (ErrorCode.RATE_LIMIT, ("rate limit",)),
        (ErrorCode.TIMEOUT, ("timeout",)),
        (ErrorCode.TIMEOUT, ("timed out",)),
        (ErrorCode.AUTH, ("api key",)),
        (ErrorCode.AUTH, ("unauthorized",)),
        (ErrorCode.AUTH, ("forbidden",)),
        (ErrorCode.NOT_FOUND, ("not found",)),
        (ErrorCode.CONNECTIVITY, ("connection reset",)),
        (ErrorCode.CONNECTIVITY, ("unreachable",)),
        (ErrorCode.VALIDATION, ("invalid",)),
        (ErrorCode.SERVER_ERROR, ("server error",)),
    )
    for code, patterns in PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (builtin and ``httpx``).
        3. Refused/unresolvable/network failures.
        4. HTTP status mapping.
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.NetworkError) or is_connection_refused(exc) or is_name_resolution_failure(exc):
        return ErrorCode.CONNECTIVITY
    status = _extract_status(exc)
    if status is not None:
        return status_to_code(status)
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "status_to_code",
    "is_connection_refused",
    "is_name_resolution_failure",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]

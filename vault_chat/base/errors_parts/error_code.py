"""
Normalized chat error codes (taxonomy).

Defines the `ErrorCode` enumeration used by provider adapters, the stream
session and the classification helpers. Values are lowercase snake_case and
are considered a stable public contract for logging.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    CONFIG = "config"
    CONNECTIVITY = "connectivity"
    PROTOCOL = "protocol"
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]

"""Cancellation error type.

Defines the public ``CancelledError`` raised when a caller observes a
cancelled stream, e.g. while iterating a ``StreamController``.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Distinguishes a user-initiated stop from a provider failure; cancellation
    is never reported through ``on_error``.
    """

__all__ = ["CancelledError"]

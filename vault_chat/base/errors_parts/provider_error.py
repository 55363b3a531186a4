"""
Structured provider error exception type.

Raised by adapters for failures detected before any network I/O (today: a
missing credential). The stream session forwards ``message`` to ``on_error``
unchanged and logs ``code``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Adapter-level failure with a normalized classification.

    Attributes:
        code: Normalized :class:`ErrorCode`.
        message: Text shown to the user as-is.
        provider: Adapter name (``"ollama"`` / ``"openai"``).
        model: Model the failing session targeted, when known.
        raw: Underlying exception, kept for diagnostics only.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:
        return self.message


__all__ = ["ProviderError"]

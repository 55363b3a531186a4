"""Per-session logging context.

Every event a stream session logs carries the same provider, model and
session id; :class:`LogContext` holds them once so call sites only pass the
event-specific fields.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    provider: Optional[str] = None
    model: Optional[str] = None
    session_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into log fields; ``extra`` keys never shadow the named ones."""
        out = {k: v for k, v in self.extra.items() if v is not None}
        for key in ("provider", "model", "session_id"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


__all__ = ["LogContext"]

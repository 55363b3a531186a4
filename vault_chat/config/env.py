"""vault_chat.config.env
=====================

Environment variable mapping for provider credentials.

Purpose
-------
- Map provider identifiers to the environment variable holding their
  credential.
- Resolve credentials at call time. Values are never cached here, so a key
  added to the environment (or ``.env``) is picked up by the next session.

Failure Modes
-------------
Helpers never raise for unknown providers or unset variables; they return
``None`` and let the adapter decide whether that is a configuration error.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Canonical provider -> env var mapping (local providers need no credential)
ENV_MAP: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
}

# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY", "VAULT_CHAT_OPENAI_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder rather than a real value.

    Heuristics: contains 'placeholder', 'changeme' or 'your_', case-insensitive.
    Placeholder values in the process environment may be replaced by ``.env``.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or v.startswith("your_")


def get_env_var_name(provider: str) -> Optional[str]:
    """Return the canonical credential variable for ``provider`` (or None)."""
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve a credential from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-blank, non-placeholder
        candidate; ``(None, None)`` when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = (os.environ.get(name) or "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]

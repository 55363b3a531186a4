"""Coercion helpers for values sourced from configuration layers.

Config values may come from defaults, a JSON/YAML file or environment
variables, so the same field can arrive as ``str``, ``int``, ``float`` or
``None``. These helpers normalize them with an explicit fallback.
"""
from __future__ import annotations

from typing import Any


def coerce_non_empty_str(candidate: Any, fallback: str) -> str:
    """Return ``candidate`` as a stripped string, or ``fallback`` when blank or missing."""
    if candidate is None:
        return fallback
    coerced = str(candidate).strip()
    return coerced or fallback


def coerce_positive_float(candidate: Any, fallback: float) -> float:
    """Return ``candidate`` as a positive float, or ``fallback`` when unusable.

    Environment overrides such as ``OLLAMA_TIMEOUT=90`` arrive as strings.
    """
    if candidate is None or isinstance(candidate, bool):
        return fallback
    try:
        value = float(candidate)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


__all__ = ["coerce_non_empty_str", "coerce_positive_float"]

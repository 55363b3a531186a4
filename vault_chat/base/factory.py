"""Provider adapter factory.

Purpose
-------
Create provider adapters from a canonical name (``"ollama"`` or ``"openai"``).
Adapter modules are imported lazily with ``importlib`` so selecting one
provider never imports the other.

Failure modes
-------------
The factory performs no I/O, retries or fallbacks; it either returns an
adapter or raises :class:`UnknownProviderError` with an actionable message.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type

from ..config.defaults import DEFAULT_PROVIDER
from .interfaces import ProviderAdapter


class UnknownProviderError(Exception):
    """Raised when a provider name cannot be resolved to an adapter.

    Covers unknown names, adapter import failures and constructor errors.
    """


class ProviderFactory:
    """Create :class:`ProviderAdapter` instances by canonical name."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "ollama": {"module": "vault_chat.ollama.adapter", "class": "OllamaAdapter"},
        "openai": {"module": "vault_chat.openai.adapter", "class": "OpenAIAdapter"},
    }

    @classmethod
    def create(cls, provider: str | None = None, **kwargs: Any) -> ProviderAdapter:
        """Return a new adapter for ``provider`` (default provider when ``None``).

        ``kwargs`` are forwarded to the adapter constructor, e.g. ``host`` for
        Ollama or ``base_url`` for OpenAI. ``None`` values are dropped so
        they never mask configuration.
        """
        name = (provider or DEFAULT_PROVIDER).lower().strip()
        entry = cls._PROVIDERS.get(name)
        if not entry:
            raise UnknownProviderError(
                f"Unknown provider '{provider}'. Supported: {', '.join(cls.supported())}"
            )

        module_path, class_name = entry["module"], entry["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{name}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:  # pragma: no cover - packaging error
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}'"
            ) from exc

        try:
            return klass(**{k: v for k, v in kwargs.items() if v is not None})
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{name}' adapter constructor: {exc}"
            ) from exc
        except ValueError as exc:
            raise UnknownProviderError(
                f"Invalid configuration for '{name}' adapter: {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported canonical provider names in deterministic order."""
        return tuple(cls._PROVIDERS.keys())


def create_adapter(provider: str | None = None, **kwargs: Any) -> ProviderAdapter:
    """Shortcut for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


__all__ = ["UnknownProviderError", "ProviderFactory", "create_adapter"]

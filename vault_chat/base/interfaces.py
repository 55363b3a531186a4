"""
Provider-agnostic interfaces for the chat client.

Re-exports the Protocols kept in single-class modules under
``vault_chat.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import ModelListingProvider, ProviderAdapter

__all__ = ["ProviderAdapter", "ModelListingProvider"]

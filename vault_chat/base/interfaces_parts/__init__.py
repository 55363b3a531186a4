"""Protocols backing ``vault_chat.base.interfaces``."""

from .provider_adapter import ProviderAdapter
from .model_listing_provider import ModelListingProvider

__all__ = ["ProviderAdapter", "ModelListingProvider"]

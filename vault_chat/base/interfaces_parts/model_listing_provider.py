"""ModelListingProvider Protocol (single-class module)."""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from ..models_parts.model_info import ModelInfo


@runtime_checkable
class ModelListingProvider(Protocol):
    """Capability marker for adapters that expose a static model catalog."""

    def list_models(self) -> List[ModelInfo]:
        ...

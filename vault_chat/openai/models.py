"""Static OpenAI model catalog offered to the chat panel.

The list is curated rather than fetched from ``/v1/models``: the hosted API
returns every model the key can see, most of which are not chat models.
"""

from __future__ import annotations

from typing import List

from ..base.models import ModelInfo

OPENAI_MODELS: tuple[ModelInfo, ...] = (
    ModelInfo(id="gpt-5-mini", name="GPT-5 Mini", description="Fast and efficient (default)"),
    ModelInfo(id="gpt-5", name="GPT-5", description="Most capable model"),
    ModelInfo(id="gpt-4.1", name="GPT-4.1", description="Previous generation"),
    ModelInfo(id="gpt-4o", name="GPT-4o", description="Multimodal model"),
)


def get_openai_models() -> List[ModelInfo]:
    """Return a fresh list copy of the catalog."""
    return list(OPENAI_MODELS)


__all__ = ["OPENAI_MODELS", "get_openai_models"]

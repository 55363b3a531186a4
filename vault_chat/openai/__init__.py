"""OpenAI (hosted API) provider package."""

from .adapter import OpenAIAdapter
from .models import OPENAI_MODELS, get_openai_models

__all__ = ["OpenAIAdapter", "OPENAI_MODELS", "get_openai_models"]

"""Small, side-effect free helpers shared by adapters, services and the CLI."""

from .coerce import coerce_non_empty_str, coerce_positive_float
from .messages import build_messages

__all__ = ["coerce_non_empty_str", "coerce_positive_float", "build_messages"]

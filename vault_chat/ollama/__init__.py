"""Ollama (local server) provider package."""

from .adapter import OllamaAdapter

__all__ = ["OllamaAdapter"]

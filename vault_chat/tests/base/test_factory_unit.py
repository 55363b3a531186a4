"""ProviderFactory: name resolution, kwargs forwarding and failures."""
from __future__ import annotations

import pytest

from vault_chat.base.factory import ProviderFactory, UnknownProviderError, create_adapter
from vault_chat.ollama import OllamaAdapter
from vault_chat.openai import OpenAIAdapter


def test_supported_names():
    assert ProviderFactory.supported() == ("ollama", "openai")  # nosec B101


def test_default_provider_is_openai():
    assert isinstance(ProviderFactory.create(), OpenAIAdapter)  # nosec B101


def test_create_forwards_kwargs_and_drops_none():
    adapter = create_adapter(" Ollama ", host="http://box:11434", timeout_seconds=None)
    assert isinstance(adapter, OllamaAdapter)  # nosec B101
    assert adapter.host == "http://box:11434"  # nosec B101
    assert adapter.timeout_seconds == 60.0  # nosec B101


def test_unknown_provider():
    with pytest.raises(UnknownProviderError, match="Supported: ollama, openai"):
        ProviderFactory.create("gemini")


def test_bad_constructor_arguments():
    with pytest.raises(UnknownProviderError, match="Invalid arguments"):
        ProviderFactory.create("ollama", base_url="http://x")


def test_invalid_config_value_is_wrapped():
    with pytest.raises(UnknownProviderError, match="Invalid configuration for 'openai' adapter"):
        ProviderFactory.create("openai", max_output_tokens="lots")

"""Layered configuration: defaults, config file, environment, overrides and
the ``.env`` loader."""
from __future__ import annotations

import json
import os

from vault_chat.config import DEFAULTS, get_model, get_provider_config, reset_config_cache
from vault_chat.config.env import get_env_var_candidates, is_placeholder, resolve_provider_key


def test_defaults():
    assert get_provider_config("ollama") == DEFAULTS["ollama"]  # nosec B101
    assert get_model("openai") == "gpt-5-mini"  # nosec B101
    assert get_provider_config("nope") == {}  # nosec B101


def test_merge_order(monkeypatch, tmp_path):
    cfg = tmp_path / "vault.json"
    cfg.write_text(json.dumps({"ollama": {"model": "from-file", "host": "http://file:1"}}), encoding="utf-8")
    monkeypatch.setenv("VAULT_CHAT_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("OLLAMA_HOST", "http://env:2")
    reset_config_cache()
    merged = get_provider_config("ollama", overrides={"model": "override", "host": None})
    assert merged["model"] == "override"  # nosec B101
    assert merged["host"] == "http://env:2"  # nosec B101


def test_yaml_config_file(monkeypatch, tmp_path):
    cfg = tmp_path / "vault.yaml"
    cfg.write_text("openai:\n  model: gpt-4.1\n  max_output_tokens: 2048\n", encoding="utf-8")
    monkeypatch.setenv("VAULT_CHAT_CONFIG_FILE", str(cfg))
    reset_config_cache()
    merged = get_provider_config("OpenAI")
    assert merged["model"] == "gpt-4.1"  # nosec B101
    assert merged["max_output_tokens"] == 2048  # nosec B101
    assert merged["base_url"] == "https://api.openai.com/v1"  # nosec B101


def test_blank_env_values_are_ignored(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "   ")
    assert get_model("openai") == "gpt-5-mini"  # nosec B101


def test_dotenv_fills_missing_and_placeholder_values(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n\nOLLAMA_MODEL='mistral'\nOPENAI_API_KEY=sk-real\nnot a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    monkeypatch.setenv("OPENAI_API_KEY", "your_api_key_here")
    monkeypatch.delenv("OLLAMA_MODEL", raising=False)
    reset_config_cache()
    try:
        assert get_model("ollama") == "mistral"  # nosec B101
        assert os.environ["OPENAI_API_KEY"] == "sk-real"  # nosec B101
    finally:
        os.environ.pop("OLLAMA_MODEL", None)


def test_dotenv_does_not_override_real_values(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("OLLAMA_MODEL=from-dotenv\n", encoding="utf-8")
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    monkeypatch.setenv("OLLAMA_MODEL", "from-shell")
    reset_config_cache()
    assert get_model("ollama") == "from-shell"  # nosec B101


def test_placeholder_detection():
    assert is_placeholder("your_key") is True  # nosec B101
    assert is_placeholder("CHANGEME") is True  # nosec B101
    assert is_placeholder("sk-abc") is False  # nosec B101
    assert is_placeholder(None) is False  # nosec B101


def test_resolve_provider_key_aliases(monkeypatch):
    assert list(get_env_var_candidates("openai")) == ["OPENAI_API_KEY", "VAULT_CHAT_OPENAI_API_KEY"]  # nosec B101
    assert resolve_provider_key("openai") == (None, None)  # nosec B101
    monkeypatch.setenv("VAULT_CHAT_OPENAI_API_KEY", "sk-alias")
    assert resolve_provider_key("openai") == ("sk-alias", "VAULT_CHAT_OPENAI_API_KEY")  # nosec B101
    monkeypatch.setenv("OPENAI_API_KEY", "sk-canonical")
    assert resolve_provider_key("openai") == ("sk-canonical", "OPENAI_API_KEY")  # nosec B101
    assert resolve_provider_key("ollama") == (None, None)  # nosec B101

"""Layered configuration for the chat client.

Goals
-----
* Centralize defaults (hosts, base URLs, models, timeouts).
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) named by
       ``VAULT_CHAT_CONFIG_FILE``
    3. Environment variables (``OLLAMA_HOST``, ``OPENAI_MODEL``, ...)
    4. In-code overrides passed to the helper
* Load a ``.env`` file (path from ``DOTENV_FILE``, default ``./.env``) once,
  before any environment lookup.

Credentials are deliberately not part of the merged mapping: adapters read
them through :mod:`vault_chat.config.env` on every call.

Environment Variable Conventions
--------------------------------
<PROVIDER>_MODEL, <PROVIDER>_HOST, <PROVIDER>_BASE_URL, <PROVIDER>_TIMEOUT
e.g. OLLAMA_HOST, OPENAI_BASE_URL.

External Config File (Optional)
-------------------------------
```
ollama:
  host: http://127.0.0.1:11434
  model: llama3.2
openai:
  model: gpt-5-mini
  max_output_tokens: 2048
```

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
* reset_config_cache() -> None
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import json
import os

import yaml

from .env import is_placeholder
from .defaults import (
    OLLAMA_DEFAULT_HOST,
    OLLAMA_DEFAULT_MODEL,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
    OPENAI_MAX_OUTPUT_TOKENS,
)


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "ollama": {
        "model": OLLAMA_DEFAULT_MODEL,
        "host": OLLAMA_DEFAULT_HOST,
    },
    "openai": {
        "model": OPENAI_DEFAULT_MODEL,
        "base_url": OPENAI_DEFAULT_BASE_URL,
        "max_output_tokens": OPENAI_MAX_OUTPUT_TOKENS,
    },
}


ENV_FIELD_MAP = {
    "model": "MODEL",
    "host": "HOST",
    "base_url": "BASE_URL",
    "timeout": "TIMEOUT",
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Existing
    environment variables win unless they hold a placeholder value.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("VAULT_CHAT_CONFIG_FILE")
    if not path or not Path(path).is_file():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, suffix in ENV_FIELD_MAP.items():
        val = os.getenv(f"{prefix}_{suffix}")
        if val is not None and val.strip():
            out[field] = val.strip()
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    Unknown providers yield only what the file, env and overrides supply.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = dict(DEFAULTS.get(name, {}))

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def reset_config_cache() -> None:
    """Forget the cached config file and allow ``.env`` to be read again."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def ensure_env_loaded() -> None:
    """Load ``.env`` if that has not happened yet (used before key lookups)."""
    _load_dotenv_once()


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "ensure_env_loaded",
    "DEFAULTS",
]

"""vault_chat.config.defaults
==========================

Central place for small, stable default values used by the adapters, the
session layer and the CLI. Values may be overridden through environment
variables or the optional config file (see ``vault_chat.config``).

This module performs no I/O and imports nothing from the rest of the package
so it can be imported from anywhere without cycles.
"""

from __future__ import annotations

# ---- Provider selection ----
# Provider used by the chat handlers and the CLI when none is requested.
DEFAULT_PROVIDER = "openai"
SUPPORTED_PROVIDERS = ("ollama", "openai")

# ---- Local server (Ollama) ----
OLLAMA_DEFAULT_HOST = "http://localhost:11434"
OLLAMA_CHAT_PATH = "/api/chat"
OLLAMA_DEFAULT_MODEL = "llama3.2"

# ---- Hosted API (OpenAI) ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
OPENAI_CHAT_PATH = "/chat/completions"
OPENAI_DEFAULT_MODEL = "gpt-5-mini"
# Completion budget sent as ``max_completion_tokens``.
OPENAI_MAX_OUTPUT_TOKENS = 4096

# ---- Timeouts (seconds) ----
LOCAL_TIMEOUT_SECONDS = 60.0
HOSTED_TIMEOUT_SECONDS = 120.0

# ---- Session registry ----
# Slot used by callers that do not supply a session id (single chat panel).
DEFAULT_SESSION_ID = "default"


__all__ = [
    "DEFAULT_PROVIDER",
    "SUPPORTED_PROVIDERS",
    "OLLAMA_DEFAULT_HOST",
    "OLLAMA_CHAT_PATH",
    "OLLAMA_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_CHAT_PATH",
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_MAX_OUTPUT_TOKENS",
    "LOCAL_TIMEOUT_SECONDS",
    "HOSTED_TIMEOUT_SECONDS",
    "DEFAULT_SESSION_ID",
]

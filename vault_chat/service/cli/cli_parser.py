"""CLI parser construction for vault-chat.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions`` to keep the presentation layer thin.
"""

from __future__ import annotations

import argparse

from ...config.defaults import DEFAULT_PROVIDER, SUPPORTED_PROVIDERS

COMMANDS = ("chat", "models")


def _positive_float(value: str) -> float:
    """argparse ``type`` accepting strictly positive numbers."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be greater than zero")
    return parsed


def add_provider_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--provider", choices=SUPPORTED_PROVIDERS, default=DEFAULT_PROVIDER)


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level parser with ``chat`` and ``models`` subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Configured parser. No I/O or network calls happen here.
    """
    p = argparse.ArgumentParser(prog="vault-chat", description="Stream chat completions from Ollama or OpenAI")
    p.add_argument("--log-level", default=None, help="Override VAULT_CHAT_LOG_LEVEL (e.g. DEBUG)")
    sub = p.add_subparsers(dest="cmd")

    # chat
    p_chat = sub.add_parser("chat", help="Stream a reply to a prompt (default)")
    p_chat.add_argument("prompt", nargs="?", default=None, help="Prompt text; read from stdin when omitted")
    add_provider_flag(p_chat)
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--system", default=None, help="Optional system message")
    p_chat.add_argument("--timeout", type=_positive_float, default=None, help="Idle timeout in seconds")
    p_chat.add_argument("--json", action="store_true", help="Print one JSON event per line")

    # models
    p_models = sub.add_parser("models", help="List the provider's model catalog")
    add_provider_flag(p_models)
    p_models.add_argument("--json", action="store_true")

    return p


__all__ = ["COMMANDS", "build_parser", "add_provider_flag"]

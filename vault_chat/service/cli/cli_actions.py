"""CLI action handlers for vault-chat.

Purpose
-------
Subcommand handlers kept apart from the parser and entrypoint. This module
has no top-level side effects and is safe to import in tests.

External Dependencies
---------------------
- Provider adapters created through :class:`ProviderFactory`; the ``chat``
  handler performs network I/O through the default httpx transport unless a
  transport is injected.

Timeout Strategy
----------------
- The stream session's idle timer applies (``--timeout`` overrides the
  adapter default). No additional timeouts are introduced here.

Error Semantics
---------------
- Stream failures print the provider message to stderr (JSON with
  ``--json``) and return ``1``.
- Unknown providers and empty prompts return ``2``.
- Ctrl-C cancels the session and returns ``130``.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional, TextIO

from ...base.factory import ProviderFactory, UnknownProviderError
from ...base.http import Transport
from ...base.interfaces import ModelListingProvider
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.streaming import EventKind, Spawner, StreamSession
from ...base.utils import build_messages


def _print_json(obj: Any, stream: TextIO) -> None:
    print(json.dumps(obj, ensure_ascii=False), file=stream, flush=True)


def read_prompt(args: argparse.Namespace, stdin: Optional[TextIO] = None) -> str:
    """Return the prompt argument, or stdin contents when it was omitted."""
    if args.prompt:
        return args.prompt
    src = stdin or sys.stdin
    if src.isatty():
        return ""
    return src.read().strip()


def handle_chat(
    args: argparse.Namespace,
    *,
    transport: Optional[Transport] = None,
    spawn: Optional[Spawner] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
    stdin: Optional[TextIO] = None,
) -> int:
    """Execute the ``chat`` subcommand.

    Parameters
    ----------
    args: argparse.Namespace
        Parsed arguments (prompt, provider, model, system, timeout, json).
    transport, spawn:
        Injection points forwarded to :class:`StreamSession` (tests).
    stdout, stderr, stdin:
        Streams used instead of the process streams when given.

    Returns
    -------
    int
        ``0`` when the stream completed, ``1`` on a stream error, ``2`` on
        usage errors and ``130`` when interrupted.
    """
    out = stdout or sys.stdout
    err = stderr or sys.stderr
    prompt = read_prompt(args, stdin)
    if not prompt:
        print("error: a prompt is required (argument or stdin)", file=err)
        return 2

    try:
        adapter = ProviderFactory.create(args.provider, timeout_seconds=args.timeout)
    except UnknownProviderError as e:
        print(f"error: {e}", file=err)
        return 2

    session = StreamSession(adapter, transport=transport, spawn=spawn, session_id="cli")
    logger = get_logger("service.cli")
    ctx = LogContext(provider=adapter.provider_name, model=args.model or adapter.default_model(), session_id="cli")
    normalized_log_event(logger, "cli.start", ctx, phase="start", emitted=None, tokens=None)

    controller = session.stream(build_messages(prompt, system=args.system), args.model)
    try:
        for event in controller:
            if args.json:
                _print_json({"type": event.kind.value, "token": event.text or None, "error": event.error}, out)
            elif event.kind is EventKind.TOKEN:
                out.write(event.text)
                out.flush()
            elif event.kind is EventKind.DONE:
                out.write("\n")
                out.flush()
    except KeyboardInterrupt:
        controller.cancel("interrupted")
        print("\ninterrupted", file=err)
        return 130

    if controller.error is not None:
        if not args.json:
            print(f"error: {controller.error}", file=err)
        return 1
    return 0


def handle_models(args: argparse.Namespace, *, stdout: Optional[TextIO] = None) -> int:
    """Execute the ``models`` subcommand.

    Prints ``id<TAB>name<TAB>description`` rows (or a JSON array with
    ``--json``). Providers without a catalog print nothing and return ``0``.
    """
    out = stdout or sys.stdout
    adapter = ProviderFactory.create(args.provider)
    models = adapter.list_models() if isinstance(adapter, ModelListingProvider) else []
    if args.json:
        _print_json([m.to_dict() for m in models], out)
        return 0
    for m in models:
        print(f"{m.id}\t{m.name}\t{m.description}", file=out)
    return 0


__all__ = ["read_prompt", "handle_chat", "handle_models"]

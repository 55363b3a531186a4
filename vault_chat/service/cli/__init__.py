"""vault-chat CLI (package entrypoint).

This package wires argument parsing to action handlers kept in small, focused
modules. It performs no provider logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.logging import configure_logger
from .cli_actions import handle_chat, handle_models
from .cli_parser import COMMANDS, build_parser


def main(argv: Optional[list[str]] = None) -> int:
	"""CLI entrypoint.

	Parameters
	----------
	argv: Optional[list[str]]
		Argument vector; when ``None`` uses ``sys.argv[1:]``.

	Returns
	-------
	int
		Process exit code (0 success, non-zero on error).
	"""
	p = build_parser()
	# inject the default "chat" subcommand when omitted
	argv_list = list(sys.argv[1:] if argv is None else argv)
	argv_list = _with_default_command(argv_list)
	args = p.parse_args(argv_list)

	if args.log_level:
		configure_logger(level=args.log_level)
	if args.cmd == "models":
		return handle_models(args)
	return handle_chat(args)


def _with_default_command(argv_list: list[str]) -> list[str]:
	"""Insert ``chat`` after any leading ``--log-level`` unless a command is given."""
	head: list[str] = []
	rest = list(argv_list)
	if rest[:1] == ["--log-level"]:
		head, rest = rest[:2], rest[2:]
	elif rest and rest[0].startswith("--log-level="):
		head, rest = rest[:1], rest[1:]
	if rest and (rest[0] in COMMANDS or rest[0] in ("-h", "--help")):
		return argv_list
	return head + ["chat"] + rest


if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())

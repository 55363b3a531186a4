"""``python -m vault_chat.service.cli`` entrypoint (same as ``vault-chat``)."""

from __future__ import annotations

from . import main


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

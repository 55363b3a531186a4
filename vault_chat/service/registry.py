"""In-flight stream sessions keyed by caller-supplied id.

Purpose
-------
The chat panel drives at most one conversation per id. Starting a new
session under an id that is still streaming cancels the older session so two
streams never interleave tokens into the same panel. Finished sessions
remove themselves through a terminal listener.

Cancellation
------------
Each session receives a child of the registry's root ``CancellationToken``.
``shutdown`` cancels the root, which cascades to every live session and makes
the registry refuse new sessions.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..base.cancellation import CancellationToken
from ..base.interfaces import ProviderAdapter
from ..base.logging import get_logger, log_event
from ..base.models import ChatMessage
from ..base.streaming import StreamSession
from ..config.defaults import DEFAULT_SESSION_ID

SessionFactory = Callable[..., StreamSession]


class SessionRegistry:
    """Thread-safe map of session id to running :class:`StreamSession`.

    Parameters:
        session_factory: Builds sessions; receives the adapter positionally
            and ``token``/``session_id`` plus ``session_kwargs`` by keyword.
        **session_kwargs: Forwarded to every session (e.g. ``transport``,
            ``spawn``, ``timer_factory`` in tests).
    """

    def __init__(self, *, session_factory: Optional[SessionFactory] = None, **session_kwargs: Any) -> None:
        self._session_factory: SessionFactory = session_factory or StreamSession
        self._session_kwargs = session_kwargs
        self._sessions: Dict[str, StreamSession] = {}
        self._lock = threading.Lock()
        self._root = CancellationToken()
        self._logger = get_logger("service.registry")

    def start(
        self,
        session_id: Optional[str],
        adapter: ProviderAdapter,
        messages: Iterable[ChatMessage],
        model: Optional[str],
        on_token: Callable[[str], None],
        on_done: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> StreamSession:
        """Start a session under ``session_id``, superseding any running one.

        Raises ``RuntimeError`` after :meth:`shutdown`.
        """
        if self._root.cancelled:
            raise RuntimeError("session registry is shut down")
        sid = session_id or DEFAULT_SESSION_ID
        session = self._session_factory(
            adapter,
            token=self._root.child(),
            session_id=sid,
            **self._session_kwargs,
        )
        with self._lock:
            previous = self._sessions.get(sid)
            self._sessions[sid] = session
        if previous is not None:
            log_event(self._logger, "registry.superseded", session_id=sid)
            previous.cancel("superseded")
        session.add_terminal_listener(self._forget)
        session.start(messages, model, on_token, on_done, on_error)
        return session

    def get(self, session_id: Optional[str]) -> Optional[StreamSession]:
        with self._lock:
            return self._sessions.get(session_id or DEFAULT_SESSION_ID)

    def cancel(self, session_id: Optional[str] = None, reason: Optional[str] = None) -> bool:
        """Cancel the session under ``session_id``; return whether one was running."""
        with self._lock:
            session = self._sessions.get(session_id or DEFAULT_SESSION_ID)
        if session is None:
            return False
        session.cancel(reason or "stopped")
        return True

    def cancel_all(self, reason: Optional[str] = None) -> int:
        """Cancel every running session; return how many were cancelled."""
        with self._lock:
            sessions = list(self._sessions.values())
        for session in sessions:
            session.cancel(reason or "stopped")
        return len(sessions)

    def shutdown(self) -> None:
        """Cancel every session and refuse new ones."""
        self._root.cancel("registry shutdown")

    def active(self) -> List[str]:
        """Return ids of sessions that have not finished yet."""
        with self._lock:
            return [sid for sid, s in self._sessions.items() if not s.finished]

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def _forget(self, session: StreamSession) -> None:
        with self._lock:
            if self._sessions.get(session.session_id) is session:
                del self._sessions[session.session_id]
        self._root.unlink_child(session.token)


__all__ = ["SessionRegistry", "SessionFactory"]

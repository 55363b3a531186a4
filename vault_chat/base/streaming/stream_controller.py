"""StreamController: pull-style view of a stream session.

Wraps the push callbacks of :class:`StreamSession` in a single-use iterator of
:class:`StreamEvent`. The session's worker pushes into a queue; iteration
blocks on that queue, so the consumer may live on any thread.
"""
from __future__ import annotations

import queue
from typing import Iterator, Optional

from ..cancellation import CancelledError
from .streaming import ChatResult, StreamEvent, accumulate_events


class StreamController:
    """Cancellable, single-use iterator over one session's events.

    Responsibilities:
      * Yield zero or more ``TOKEN`` events then at most one terminal event.
      * Expose ``cancel(reason)``; a cancelled stream simply ends.
      * Cancel the session when the consumer stops iterating early.
    """

    def __init__(self, session) -> None:  # untyped to avoid a session import cycle
        self._session = session
        self._queue: "queue.Queue[Optional[StreamEvent]]" = queue.Queue()
        self._consumed = False
        self._finished = False
        self._cancelled = False
        self._terminal_event: StreamEvent | None = None
        session.add_terminal_listener(lambda _session: self._queue.put(None))

    # Session callbacks ---------------------------------------------------
    def on_token(self, text: str) -> None:
        self._queue.put(StreamEvent.token(text))

    def on_done(self) -> None:
        self._queue.put(StreamEvent.done())

    def on_error(self, message: str) -> None:
        self._queue.put(StreamEvent.failure(message))

    # Iteration -----------------------------------------------------------
    def __iter__(self) -> Iterator[StreamEvent]:
        if self._consumed:
            raise RuntimeError("stream already consumed")
        self._consumed = True
        return self._events()

    def _events(self) -> Iterator[StreamEvent]:
        try:
            while True:
                event = self._queue.get()
                if event is None:
                    self._finished = True
                    return
                if event.terminal:
                    self._finished = True
                    self._terminal_event = event
                yield event
                if self._finished:
                    return
        finally:
            if not self._finished:
                # consumer stopped early
                self._session.cancel("consumer stopped iterating")

    # API -----------------------------------------------------------------
    def cancel(self, reason: str | None = None) -> None:
        """Cancel the underlying session. Safe to call repeatedly."""
        self._cancelled = True
        self._session.cancel(reason)

    def result(self) -> ChatResult:
        """Consume the stream and return the accumulated text.

        Raises ``CancelledError`` when the stream ended through cancellation
        rather than a ``DONE`` or ``ERROR`` event.
        """
        outcome = accumulate_events(self)
        if self._terminal_event is None:
            raise CancelledError("stream cancelled")
        return outcome

    @property
    def session(self):
        return self._session

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether iteration reached the end of the stream."""
        return self._finished

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def terminal_event(self) -> StreamEvent | None:  # noqa: D401 - short property
        """The ``DONE``/``ERROR`` event, once iteration has seen it."""
        return self._terminal_event

    @property
    def error(self) -> str | None:  # noqa: D401 - short property
        """Error message of the terminal event, if it was an error."""
        return self._terminal_event.error if self._terminal_event else None


__all__ = ["StreamController"]

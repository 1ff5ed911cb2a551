"""Hand-off of work from background threads to the UI thread."""

from __future__ import annotations

import logging
import queue
from typing import Any, Callable


logger = logging.getLogger(__name__)


class UiDispatcher:
    """FIFO task queue drained on the UI thread.

    Socket handlers and tray callbacks run on their own threads; they only
    ``post`` here. The UI loop calls ``drain`` periodically.
    """

    def __init__(self) -> None:
        self._tasks: "queue.Queue[tuple[Callable[..., Any], tuple]]" = queue.Queue()

    def post(self, fn: Callable[..., Any], *args: Any) -> None:
        self._tasks.put((fn, args))

    def pending(self) -> int:
        return self._tasks.qsize()

    def drain(self) -> int:
        """Run every queued task on the calling thread. Returns how many ran."""

        ran = 0
        while True:
            try:
                fn, args = self._tasks.get_nowait()
            except queue.Empty:
                return ran

            ran += 1
            try:
                fn(*args)
            except Exception:
                logger.exception("UI task %r failed", getattr(fn, "__name__", fn))

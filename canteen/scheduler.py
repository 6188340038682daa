"""Delayed-task schedulers driving order lifecycle callbacks."""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class Scheduler(Protocol):
    """Runs callbacks after a delay, measured in seconds on the scheduler's own clock."""

    def now(self) -> float: ...

    def call_later(self, delay: float, callback: Callback) -> None: ...


class ThreadScheduler:
    """
    Delayed-task queue served by one daemon thread.

    Callbacks are fire-and-forget: once queued they cannot be withdrawn and run
    in due order on the worker thread. A failing callback is logged and the
    worker keeps serving the queue.
    """

    def __init__(self, name: str = "canteen-scheduler") -> None:
        self._name = name
        self._queue: list[tuple[float, int, Callback]] = []
        self._cond = threading.Condition()
        self._seq = itertools.count()
        self._thread: threading.Thread | None = None
        self._closed = False

    def now(self) -> float:
        return time.monotonic()

    def call_later(self, delay: float, callback: Callback) -> None:
        with self._cond:
            if self._closed:
                raise RuntimeError("Scheduler has been shut down")
            due = self.now() + max(0.0, delay)
            heapq.heappush(self._queue, (due, next(self._seq), callback))
            if self._thread is None:
                self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
                self._thread.start()
            self._cond.notify()

    def pending(self) -> int:
        with self._cond:
            return len(self._queue)

    def shutdown(self, timeout: float | None = 1.0) -> None:
        """Stop the worker. Callbacks that have not run yet are dropped."""
        with self._cond:
            self._closed = True
            dropped = len(self._queue)
            self._queue.clear()
            self._cond.notify_all()
            thread = self._thread
        if dropped:
            logger.debug("scheduler_shutdown dropped=%d", dropped)
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _next_due(self) -> Callback | None:
        with self._cond:
            while not self._closed:
                if not self._queue:
                    self._cond.wait()
                    continue
                due, _, callback = self._queue[0]
                wait_for = due - self.now()
                if wait_for <= 0:
                    heapq.heappop(self._queue)
                    return callback
                self._cond.wait(wait_for)
            return None

    def _run(self) -> None:
        while True:
            callback = self._next_due()
            if callback is None:
                return
            try:
                callback()
            except Exception:
                logger.exception("scheduled callback failed")


class ManualScheduler:
    """Scheduler on a virtual clock that only moves when advance() is called."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._queue: list[tuple[float, int, Callback]] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callback) -> None:
        heapq.heappush(self._queue, (self._now + max(0.0, delay), next(self._seq), callback))

    def pending(self) -> int:
        return len(self._queue)

    def advance(self, seconds: float) -> None:
        """Move the clock forward, running every callback that falls due on the way."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            callback()
        self._now = target

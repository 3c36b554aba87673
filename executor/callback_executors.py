"""Execution contexts for delivering simulator callbacks."""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Any

logger = logging.getLogger("imssim.executor")

EXECUTOR_KINDS = ("inline", "queued", "thread")


class InlineExecutor:
    """Runs each callback immediately on the submitting thread.

    Exceptions raised by a callback propagate to whoever triggered it.
    """

    def submit(self, fn: Callable[[], Any]) -> None:
        fn()


class QueuedExecutor:
    """Holds callbacks until the test drains them."""

    def __init__(self) -> None:
        self._queue: deque[Callable[[], Any]] = deque()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def submit(self, fn: Callable[[], Any]) -> None:
        self._queue.append(fn)

    def run_next(self) -> bool:
        """Run the oldest queued callback; return False if none was queued."""
        if not self._queue:
            return False
        self._queue.popleft()()
        return True

    def run_pending(self) -> int:
        """Run callbacks until the queue is empty, including newly queued ones."""
        count = 0
        while self.run_next():
            count += 1
        if count:
            logger.debug("Drained %d queued callbacks", count)
        return count


def build_executor(kind: str) -> InlineExecutor | QueuedExecutor | ThreadPoolExecutor:
    """Build an executor by name. The caller owns shutdown of ``thread``."""
    kind_l = kind.strip().lower()
    if kind_l == "inline":
        return InlineExecutor()
    if kind_l == "queued":
        return QueuedExecutor()
    if kind_l == "thread":
        return ThreadPoolExecutor(max_workers=1, thread_name_prefix="ims-callback")
    raise ValueError(f"Unknown executor kind: {kind!r} (expected one of {', '.join(EXECUTOR_KINDS)})")

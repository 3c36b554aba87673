"""Callback executor tests."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from executor.callback_executors import InlineExecutor, QueuedExecutor, build_executor
from ims.callbacks import CallbackExecutor


def test_inline_executor_runs_immediately() -> None:
    calls: list[int] = []
    InlineExecutor().submit(lambda: calls.append(1))
    assert calls == [1]


def test_queued_executor_runs_in_fifo_order_and_drains_nested_work() -> None:
    executor = QueuedExecutor()
    calls: list[str] = []
    executor.submit(lambda: calls.append("a"))
    executor.submit(lambda: executor.submit(lambda: calls.append("nested")))
    executor.submit(lambda: calls.append("b"))

    assert calls == []
    assert executor.pending == 3
    assert executor.run_next() is True
    assert calls == ["a"]
    assert executor.run_pending() == 3
    assert calls == ["a", "b", "nested"]
    assert executor.run_next() is False


def test_build_executor_kinds() -> None:
    assert isinstance(build_executor("inline"), InlineExecutor)
    assert isinstance(build_executor(" Queued "), QueuedExecutor)
    pool = build_executor("thread")
    try:
        assert isinstance(pool, ThreadPoolExecutor)
    finally:
        pool.shutdown(wait=True)

    with pytest.raises(ValueError):
        build_executor("looper")


def test_executors_satisfy_callback_executor_protocol() -> None:
    assert isinstance(InlineExecutor(), CallbackExecutor)
    assert isinstance(QueuedExecutor(), CallbackExecutor)
    with ThreadPoolExecutor(max_workers=1) as pool:
        assert isinstance(pool, CallbackExecutor)

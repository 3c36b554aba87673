"""Listener registry tests."""

from __future__ import annotations

from executor.callback_executors import InlineExecutor, QueuedExecutor
from ims.listener_registry import ListenerRegistry


def test_registry_keeps_insertion_order_and_rebinds_in_place() -> None:
    registry: ListenerRegistry[str] = ListenerRegistry()
    first, second = InlineExecutor(), QueuedExecutor()
    registry.put("a", first)
    registry.put("b", first)
    registry.put("c", first)
    registry.put("a", second)

    assert registry.listeners() == ("a", "b", "c")
    assert len(registry) == 3
    assert registry.executor_for("a") is second


def test_remove_absent_listener_is_noop() -> None:
    registry: ListenerRegistry[str] = ListenerRegistry()
    registry.put("a", InlineExecutor())

    assert registry.remove("a") is True
    assert registry.remove("a") is False
    assert "a" not in registry
    assert len(registry) == 0


def test_items_is_a_snapshot() -> None:
    registry: ListenerRegistry[str] = ListenerRegistry()
    registry.put("a", InlineExecutor())
    registry.put("b", InlineExecutor())

    seen = []
    for listener, _executor in registry.items():
        seen.append(listener)
        registry.remove("b")

    assert seen == ["a", "b"]
    assert registry.listeners() == ("a",)

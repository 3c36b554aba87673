"""Ordered listener -> executor bindings."""

from __future__ import annotations

from typing import Generic, TypeVar

from ims.callbacks import CallbackExecutor

L = TypeVar("L")


class ListenerRegistry(Generic[L]):
    """Maps each listener to the executor its notifications run on.

    Iteration follows first-registration order. Registering a listener again
    rebinds its executor without moving it.
    """

    def __init__(self) -> None:
        self._bindings: dict[L, CallbackExecutor] = {}

    def put(self, listener: L, executor: CallbackExecutor) -> None:
        self._bindings[listener] = executor

    def remove(self, listener: L) -> bool:
        """Drop the binding if present and report whether it existed."""
        return self._bindings.pop(listener, None) is not None

    def executor_for(self, listener: L) -> CallbackExecutor | None:
        return self._bindings.get(listener)

    def listeners(self) -> tuple[L, ...]:
        return tuple(self._bindings)

    def items(self) -> list[tuple[L, CallbackExecutor]]:
        """Snapshot of bindings, safe to iterate while the registry changes."""
        return list(self._bindings.items())

    def __contains__(self, listener: object) -> bool:
        return listener in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

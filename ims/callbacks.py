"""Listener and execution-context interfaces used by the simulator."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from ims.types import ImsReasonInfo, MmTelCapabilities, RegistrationTech


@runtime_checkable
class CallbackExecutor(Protocol):
    """Runs submitted callbacks now or later.

    ``concurrent.futures`` executors satisfy this protocol as they are.
    """

    def submit(self, fn: Callable[[], Any]) -> Any:
        """Accept a zero-argument unit of work."""


class RegistrationCallback:
    """Receives IMS registration state changes. Override what you need."""

    def on_registering(self, tech: RegistrationTech) -> None:
        """IMS is trying to register over ``tech``."""

    def on_registered(self, tech: RegistrationTech) -> None:
        """IMS is registered over ``tech``."""

    def on_unregistered(self, reason_info: ImsReasonInfo) -> None:
        """IMS is no longer registered."""


class CapabilityCallback:
    """Receives MmTel capability status changes while IMS is registered."""

    def on_capabilities_status_changed(self, capabilities: MmTelCapabilities) -> None:
        """The available capability set changed."""

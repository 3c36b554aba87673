"""Test double for the IMS MmTel registration and capability APIs.

The simulator supports IMS by default and starts unregistered. A test drives
it through ``set_*`` calls and observes the callbacks it registered:

    ```python
    simulator = ImsMmTelSimulator()
    callback = RecordingRegistrationCallback()
    simulator.register_ims_registration_callback(InlineExecutor(), callback)

    simulator.set_ims_registered(RegistrationTech.LTE)
    assert callback.describe() == ["registered:LTE"]
    ```

Notifications are never run directly. Each one is handed to the executor the
callback was registered with, so whether it runs immediately or later is up
to that executor.

Single-writer contract: one test thread mutates the simulator. There is no
locking, and concurrent mutation from several threads is undefined.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any

from core.event_bus import EventBus
from governance.permission_engine import READ_PRIVILEGED_PHONE_STATE, PermissionEngine
from ims.callbacks import CallbackExecutor, CapabilityCallback, RegistrationCallback
from ims.errors import ImsSecurityError, ImsUnsupportedError, PreconditionError
from ims.listener_registry import ListenerRegistry
from ims.state import ImsState
from ims.types import (
    ImsReasonInfo,
    MmTelCapabilities,
    MmTelCapability,
    RegistrationTech,
    parse_capability,
    parse_registration_tech,
)

logger = logging.getLogger("imssim.simulator")


class ImsMmTelSimulator:
    """Simulated IMS MmTel manager with registration and capability callbacks."""

    def __init__(
        self,
        *,
        ims_available_on_device: bool = True,
        permissions: PermissionEngine | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.permissions = permissions or PermissionEngine()
        self.event_bus = event_bus or EventBus()
        self._state = ImsState(ims_available_on_device=bool(ims_available_on_device))
        self._registration_callbacks: ListenerRegistry[RegistrationCallback] = ListenerRegistry()
        self._capability_callbacks: ListenerRegistry[CapabilityCallback] = ListenerRegistry()

    # ── State accessors ──────────────────────────────────────────────

    @property
    def ims_available_on_device(self) -> bool:
        return self._state.ims_available_on_device

    @property
    def registration_tech(self) -> RegistrationTech:
        return self._state.registration_tech

    @property
    def capabilities(self) -> MmTelCapabilities | None:
        return self._state.capabilities

    @property
    def registration_callbacks(self) -> tuple[RegistrationCallback, ...]:
        return self._registration_callbacks.listeners()

    @property
    def capability_callbacks(self) -> tuple[CapabilityCallback, ...]:
        return self._capability_callbacks.listeners()

    def state_snapshot(self) -> dict[str, Any]:
        snapshot = self._state.snapshot()
        snapshot["registration_callbacks"] = len(self._registration_callbacks)
        snapshot["capability_callbacks"] = len(self._capability_callbacks)
        return snapshot

    # ── Device support ───────────────────────────────────────────────

    def set_ims_available_on_device(self, available: bool) -> None:
        """Set whether IMS is supported.

        When false, registering either kind of callback raises
        ``ImsUnsupportedError``. Callbacks already registered stay registered.
        """
        self._state.ims_available_on_device = bool(available)
        logger.info("IMS available on device: %s", self._state.ims_available_on_device)
        self._emit("availability_changed", {"available": self._state.ims_available_on_device})

    # ── Registration callbacks ───────────────────────────────────────

    def register_ims_registration_callback(
        self, executor: CallbackExecutor, callback: RegistrationCallback
    ) -> None:
        """Bind ``callback`` to ``executor``. No notification is sent now."""
        self._register(
            self._registration_callbacks,
            "registration",
            executor,
            callback,
            operation="register_ims_registration_callback",
        )

    def unregister_ims_registration_callback(self, callback: RegistrationCallback) -> None:
        """Remove ``callback`` if it is registered. Never fails."""
        self._unregister(self._registration_callbacks, "registration", callback)

    def set_ims_registering(self, tech: RegistrationTech | int | str) -> None:
        """Notify ``on_registering`` without changing the registered tech."""
        tech = parse_registration_tech(tech)
        logger.info("IMS registering over %s", tech.name)
        self._emit("registering", {"tech": tech})
        self._dispatch(self._registration_callbacks, "on_registering", tech)

    def set_ims_registered(self, tech: RegistrationTech | int | str) -> None:
        """Record IMS as registered over ``tech`` and notify ``on_registered``."""
        tech = parse_registration_tech(tech)
        previous = self._state.registration_tech
        self._state.registration_tech = tech
        logger.info("IMS registered over %s (was %s)", tech.name, previous.name)
        self._emit("registration_changed", {"previous": previous, "current": tech})
        self._dispatch(self._registration_callbacks, "on_registered", tech)

    def set_ims_unregistered(self, reason_info: ImsReasonInfo) -> None:
        """Record IMS as unregistered and notify ``on_unregistered``."""
        previous = self._state.registration_tech
        self._state.registration_tech = RegistrationTech.NONE
        logger.info("IMS unregistered (was %s), reason %r", previous.name, reason_info)
        self._emit(
            "registration_changed",
            {"previous": previous, "current": RegistrationTech.NONE, "reason": reason_info},
        )
        self._dispatch(self._registration_callbacks, "on_unregistered", reason_info)

    # ── Capability callbacks ─────────────────────────────────────────

    def register_mmtel_capability_callback(
        self, executor: CallbackExecutor, callback: CapabilityCallback
    ) -> None:
        """Bind ``callback`` to ``executor``. No notification is sent now."""
        self._register(
            self._capability_callbacks,
            "capability",
            executor,
            callback,
            operation="register_mmtel_capability_callback",
        )

    def unregister_mmtel_capability_callback(self, callback: CapabilityCallback) -> None:
        """Remove ``callback`` if it is registered. Never fails."""
        self._unregister(self._capability_callbacks, "capability", callback)

    def is_available(
        self, capability: MmTelCapability | int | str, tech: RegistrationTech | int | str
    ) -> bool:
        """Return whether ``capability`` is available while registered over ``tech``.

        Raises ``PreconditionError`` if capabilities were never set.
        """
        self._enforce("is_available")
        capabilities = self._state.capabilities
        if capabilities is None:
            raise PreconditionError(
                "MmTel capabilities have not been set; call "
                "set_mmtel_capabilities_available() first."
            )
        capability = parse_capability(capability)
        tech = parse_registration_tech(tech)
        return capabilities.is_capable(capability) and tech == self._state.registration_tech

    def set_mmtel_capabilities_available(self, capabilities: MmTelCapabilities) -> None:
        """Store the available capabilities.

        ``on_capabilities_status_changed`` only fires while IMS is registered;
        otherwise the snapshot is stored silently.
        """
        self._state.capabilities = capabilities
        registered = self._state.registration_tech != RegistrationTech.NONE
        logger.info(
            "MmTel capabilities set to %r (%s)",
            capabilities,
            "notifying" if registered else "not registered, no notification",
        )
        self._emit("capabilities_changed", {"capabilities": capabilities, "notified": registered})
        if registered:
            self._dispatch(
                self._capability_callbacks, "on_capabilities_status_changed", capabilities
            )

    # ── Internals ────────────────────────────────────────────────────

    def _register(
        self,
        registry: ListenerRegistry[Any],
        kind: str,
        executor: CallbackExecutor,
        callback: Any,
        *,
        operation: str,
    ) -> None:
        if executor is None:
            raise ValueError("executor must not be None.")
        if callback is None:
            raise ValueError("callback must not be None.")
        self._enforce(operation)
        if not self._state.ims_available_on_device:
            logger.info("Rejected %s callback %r: IMS not available", kind, callback)
            self._emit("callback_rejected", {"kind": kind, "callback": repr(callback)})
            raise ImsUnsupportedError()
        replaced = callback in registry
        registry.put(callback, executor)
        logger.debug("%s %s callback %r", "Rebound" if replaced else "Registered", kind, callback)
        self._emit(
            "callback_registered",
            {"kind": kind, "callback": repr(callback), "replaced": replaced},
        )

    def _unregister(self, registry: ListenerRegistry[Any], kind: str, callback: Any) -> None:
        removed = registry.remove(callback)
        if removed:
            logger.debug("Unregistered %s callback %r", kind, callback)
        self._emit(
            "callback_unregistered",
            {"kind": kind, "callback": repr(callback), "removed": removed},
        )

    def _dispatch(
        self,
        registry: ListenerRegistry[Any],
        method_name: str,
        value: Any,
    ) -> None:
        for callback, executor in registry.items():
            logger.debug("Submitting %s(%r) for %r", method_name, value, callback)
            self._emit(
                "notification_submitted",
                {"method": method_name, "callback": repr(callback), "value": value},
            )
            executor.submit(partial(getattr(callback, method_name), value))

    def _enforce(self, operation: str) -> None:
        decision = self.permissions.check(
            permission=READ_PRIVILEGED_PHONE_STATE, operation=operation
        )
        if not decision.allowed:
            logger.warning("Denied %s: %s", operation, decision.reason)
            raise ImsSecurityError(READ_PRIVILEGED_PHONE_STATE, operation)

    def _emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self.event_bus.emit(event_name, payload)

"""Recording callbacks for asserting on what listeners received."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from ims.callbacks import CapabilityCallback, RegistrationCallback
from ims.types import ImsReasonInfo, MmTelCapabilities, RegistrationTech


@dataclass(frozen=True)
class RecordedEvent:
    """One callback invocation seen by a recorder."""

    kind: str
    value: Any
    thread_name: str

    def describe(self) -> str:
        if isinstance(self.value, RegistrationTech):
            return f"{self.kind}:{self.value.name}"
        if isinstance(self.value, ImsReasonInfo):
            return f"{self.kind}:{self.value.code}"
        if isinstance(self.value, MmTelCapabilities):
            return f"{self.kind}:{self.value.describe()}"
        return f"{self.kind}:{self.value}"


class _Recorder:
    def __init__(self, name: str = "") -> None:
        self.name = name
        self.events: list[RecordedEvent] = []

    def _record(self, kind: str, value: Any) -> None:
        self.events.append(RecordedEvent(kind, value, threading.current_thread().name))

    def describe(self) -> list[str]:
        return [event.describe() for event in self.events]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, events={len(self.events)})"


class RecordingRegistrationCallback(_Recorder, RegistrationCallback):
    """Registration callback that keeps every event it receives."""

    def on_registering(self, tech: RegistrationTech) -> None:
        self._record("registering", tech)

    def on_registered(self, tech: RegistrationTech) -> None:
        self._record("registered", tech)

    def on_unregistered(self, reason_info: ImsReasonInfo) -> None:
        self._record("unregistered", reason_info)


class RecordingCapabilityCallback(_Recorder, CapabilityCallback):
    """Capability callback that keeps every snapshot it receives."""

    def on_capabilities_status_changed(self, capabilities: MmTelCapabilities) -> None:
        self._record("capabilities", capabilities)

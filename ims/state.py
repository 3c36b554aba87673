"""In-memory state owned by the IMS MmTel simulator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ims.types import MmTelCapabilities, RegistrationTech


@dataclass
class ImsState:
    """Mutable simulator state for a single test run."""

    ims_available_on_device: bool = True
    registration_tech: RegistrationTech = RegistrationTech.NONE
    capabilities: MmTelCapabilities | None = None

    def snapshot(self) -> dict[str, Any]:
        capabilities: Any = self.capabilities
        if isinstance(capabilities, MmTelCapabilities):
            capabilities = capabilities.names()
        elif capabilities is not None:
            # any object with is_capable() may be stored
            capabilities = repr(capabilities)
        return {
            "ims_available_on_device": self.ims_available_on_device,
            "registration_tech": self.registration_tech.name,
            "capabilities": capabilities,
        }

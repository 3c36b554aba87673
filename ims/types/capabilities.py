"""MmTel capability flags and the immutable capability snapshot."""

from __future__ import annotations

from enum import IntFlag
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class MmTelCapability(IntFlag):
    """Individual MmTel feature capabilities."""

    VOICE = 1
    VIDEO = 2
    UT = 4
    SMS = 8
    CALL_COMPOSER = 16


def parse_capability(value: Any) -> MmTelCapability:
    """Accept a flag, an integer mask or a case-insensitive flag name."""
    if isinstance(value, MmTelCapability):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid MmTel capability: {value!r}")
    if isinstance(value, int):
        all_bits = sum(int(flag) for flag in MmTelCapability)
        if value < 0 or value & ~all_bits:
            raise ValueError(f"Invalid MmTel capability: {value!r}")
        return MmTelCapability(value)
    if isinstance(value, str):
        key = value.strip().upper()
        if key.startswith("CAPABILITY_TYPE_"):
            key = key[len("CAPABILITY_TYPE_") :]
        try:
            return MmTelCapability[key]
        except KeyError as exc:
            raise ValueError(f"Invalid MmTel capability: {value!r}") from exc
    raise ValueError(f"Invalid MmTel capability: {value!r}")


class MmTelCapabilities(BaseModel):
    """Set of MmTel capabilities reported as currently available."""

    model_config = ConfigDict(frozen=True)

    capabilities: int = 0

    @field_validator("capabilities", mode="before")
    @classmethod
    def _coerce_mask(cls, value: Any) -> int:
        if value is None:
            return 0
        if isinstance(value, (list, tuple, set, frozenset)):
            mask = 0
            for item in value:
                mask |= int(parse_capability(item))
            return mask
        return int(parse_capability(value))

    @classmethod
    def of(cls, *capabilities: MmTelCapability | int | str) -> MmTelCapabilities:
        """Build a snapshot from individual capabilities."""
        return cls(capabilities=list(capabilities))

    def is_capable(self, capability: MmTelCapability | int) -> bool:
        """Return whether every bit of ``capability`` is set. An empty mask always is."""
        bits = int(capability)
        return (self.capabilities & bits) == bits

    def with_capability(self, capability: MmTelCapability | int | str) -> MmTelCapabilities:
        return MmTelCapabilities(capabilities=self.capabilities | int(parse_capability(capability)))

    def without_capability(self, capability: MmTelCapability | int | str) -> MmTelCapabilities:
        return MmTelCapabilities(capabilities=self.capabilities & ~int(parse_capability(capability)))

    def names(self) -> list[str]:
        """Return capability names in flag order."""
        return [flag.name for flag in MmTelCapability if self.capabilities & int(flag)]

    def describe(self) -> str:
        names = self.names()
        return "|".join(names) if names else "NONE"

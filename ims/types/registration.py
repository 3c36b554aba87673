"""IMS registration technology values."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class RegistrationTech(IntEnum):
    """Network technology IMS is registered over, or NONE when unregistered."""

    NONE = -1
    LTE = 0
    IWLAN = 1
    CROSS_SIM = 2
    NR = 3


def parse_registration_tech(value: Any) -> RegistrationTech:
    """Accept an enum member, its integer value or its case-insensitive name."""
    if isinstance(value, RegistrationTech):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid registration tech: {value!r}")
    if isinstance(value, int):
        try:
            return RegistrationTech(value)
        except ValueError as exc:
            raise ValueError(f"Invalid registration tech: {value!r}") from exc
    if isinstance(value, str):
        key = value.strip().upper().replace("-", "_")
        if key.startswith("REGISTRATION_TECH_"):
            key = key[len("REGISTRATION_TECH_") :]
        try:
            return RegistrationTech[key]
        except KeyError as exc:
            raise ValueError(f"Invalid registration tech: {value!r}") from exc
    raise ValueError(f"Invalid registration tech: {value!r}")

"""Reason info passed along with IMS unregistration."""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class ImsReasonInfo(BaseModel):
    """Why IMS became unregistered. Opaque to the simulator."""

    model_config = ConfigDict(frozen=True)

    CODE_UNSPECIFIED: ClassVar[int] = 0
    CODE_REGISTRATION_ERROR: ClassVar[int] = 1000

    code: int = 0
    extra_code: int = 0
    extra_message: str | None = None

"""YAML scenario scripts that drive the simulator step by step."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    ValidationError,
    field_validator,
    model_validator,
)

from ims.types import (
    ImsReasonInfo,
    MmTelCapabilities,
    MmTelCapability,
    RegistrationTech,
    parse_capability,
    parse_registration_tech,
)

Action = Literal[
    "set_ims_available",
    "register_registration_callback",
    "unregister_registration_callback",
    "register_capability_callback",
    "unregister_capability_callback",
    "set_registering",
    "set_registered",
    "set_unregistered",
    "set_capabilities",
    "drain",
    "expect_events",
    "expect_no_events",
    "expect_tech",
    "expect_available",
]
ExpectedError = Literal["unsupported", "precondition", "security"]

Tech = Annotated[RegistrationTech, PlainValidator(parse_registration_tech)]
Capability = Annotated[MmTelCapability, PlainValidator(parse_capability)]

_REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "set_ims_available": ("available",),
    "register_registration_callback": ("listener",),
    "unregister_registration_callback": ("listener",),
    "register_capability_callback": ("listener",),
    "unregister_capability_callback": ("listener",),
    "set_registering": ("tech",),
    "set_registered": ("tech",),
    "set_capabilities": ("capabilities",),
    "expect_events": ("listener", "events"),
    "expect_no_events": ("listener",),
    "expect_tech": ("tech",),
    "expect_available": ("capability", "tech"),
}
_ERROR_ACTIONS = {
    "register_registration_callback",
    "register_capability_callback",
    "expect_available",
}


class ScenarioError(Exception):
    """Scenario file is invalid or cannot be run."""


class ScenarioAssertionError(ScenarioError):
    """A scenario expectation did not hold."""

    def __init__(self, step_index: int, action: str, message: str) -> None:
        super().__init__(f"step {step_index} ({action}): {message}")
        self.step_index = step_index
        self.action = action


class ScenarioStep(BaseModel):
    """One driver action or expectation."""

    model_config = ConfigDict(extra="forbid")

    action: Action
    listener: str | None = None
    tech: Tech | None = None
    available: bool | None = None
    capabilities: MmTelCapabilities | None = None
    capability: Capability | None = None
    reason: ImsReasonInfo | None = None
    events: list[str] | None = None
    expected: bool | None = None
    expect_error: ExpectedError | None = None

    @field_validator("capabilities", mode="before")
    @classmethod
    def _wrap_capabilities(cls, value: Any) -> Any:
        # Allow the shorthand `capabilities: [voice, video]`.
        if value is None or isinstance(value, (MmTelCapabilities, dict)):
            return value
        return {"capabilities": value}

    @model_validator(mode="after")
    def _check_fields(self) -> ScenarioStep:
        missing = [
            name for name in _REQUIRED_FIELDS.get(self.action, ()) if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"action '{self.action}' requires: {', '.join(missing)}")
        if self.expect_error is not None and self.action not in _ERROR_ACTIONS:
            raise ValueError(f"action '{self.action}' does not accept expect_error")
        if self.action == "expect_available" and self.expect_error is None and self.expected is None:
            raise ValueError("action 'expect_available' requires: expected")
        return self


class Scenario(BaseModel):
    """A named sequence of steps run against one simulator."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str = ""
    executor: Literal["inline", "queued"] | None = None
    ims_available_on_device: bool | None = None
    steps: list[ScenarioStep] = Field(default_factory=list)


def parse_scenario(data: Any, source: str = "<scenario>") -> Scenario:
    """Validate raw scenario data."""
    if not isinstance(data, dict):
        raise ScenarioError(f"Scenario must be a mapping: {source}")
    try:
        return Scenario.model_validate(data)
    except ValidationError as exc:
        raise ScenarioError(f"Invalid scenario {source}:\n{exc}") from exc


def load_scenario(path: Path) -> Scenario:
    """Load and validate a scenario YAML file."""
    if not path.exists():
        raise ScenarioError(f"Scenario file not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ScenarioError(f"Invalid YAML in {path}: {exc}") from exc
    return parse_scenario(data, source=str(path))

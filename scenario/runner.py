"""Runs a scenario script against a simulator and checks its expectations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from executor.callback_executors import InlineExecutor, QueuedExecutor
from ims.errors import ImsSecurityError, ImsUnsupportedError, PreconditionError
from ims.mmtel_simulator import ImsMmTelSimulator
from ims.recorders import RecordingCapabilityCallback, RecordingRegistrationCallback
from ims.types import ImsReasonInfo
from scenario.script import Scenario, ScenarioAssertionError, ScenarioError, ScenarioStep

logger = logging.getLogger("imssim.scenario")

_EXPECTED_ERRORS: dict[str, type[Exception]] = {
    "unsupported": ImsUnsupportedError,
    "precondition": PreconditionError,
    "security": ImsSecurityError,
}
_SIMULATOR_ERRORS = tuple(_EXPECTED_ERRORS.values())

Recorder = RecordingRegistrationCallback | RecordingCapabilityCallback


@dataclass
class ScenarioResult:
    """Outcome of a fully passing scenario run."""

    name: str
    steps_run: int = 0
    final_state: dict[str, Any] = field(default_factory=dict)
    events: dict[str, list[str]] = field(default_factory=dict)


class ScenarioRunner:
    """Executes scenario steps in order, stopping at the first failed expectation."""

    def __init__(
        self,
        scenario: Scenario,
        simulator: ImsMmTelSimulator | None = None,
        default_executor: str = "inline",
    ) -> None:
        self.scenario = scenario
        self.simulator = simulator or ImsMmTelSimulator()
        kind = scenario.executor or default_executor
        if kind == "inline":
            self.executor: InlineExecutor | QueuedExecutor = InlineExecutor()
        elif kind == "queued":
            self.executor = QueuedExecutor()
        else:
            raise ScenarioError(f"Scenarios need a deterministic executor, got '{kind}'.")
        self._listeners: dict[str, Recorder] = {}
        self._cursors: dict[str, int] = {}

    def run(self) -> ScenarioResult:
        """Run every step; raise ``ScenarioAssertionError`` on the first failure."""
        logger.info("Running scenario '%s' (%d steps)", self.scenario.name, len(self.scenario.steps))
        if self.scenario.ims_available_on_device is not None:
            self.simulator.set_ims_available_on_device(self.scenario.ims_available_on_device)

        result = ScenarioResult(name=self.scenario.name)
        for index, step in enumerate(self.scenario.steps, start=1):
            logger.debug("Step %d: %s", index, step.action)
            self._run_step(index, step)
            result.steps_run = index

        result.final_state = self.simulator.state_snapshot()
        result.events = {name: rec.describe() for name, rec in self._listeners.items()}
        return result

    def _run_step(self, index: int, step: ScenarioStep) -> None:
        handler = getattr(self, f"_do_{step.action}")
        expected_error = _EXPECTED_ERRORS.get(step.expect_error) if step.expect_error else None
        try:
            handler(index, step)
        except _SIMULATOR_ERRORS as exc:
            if expected_error is not None and isinstance(exc, expected_error):
                logger.debug("Step %d raised expected %s", index, type(exc).__name__)
                return
            raise ScenarioAssertionError(
                index, step.action, f"unexpected {type(exc).__name__}: {exc}"
            ) from exc
        if expected_error is not None:
            raise ScenarioAssertionError(
                index, step.action, f"expected {expected_error.__name__} but nothing was raised"
            )

    def _listener(self, index: int, step: ScenarioStep, kind: type[Recorder]) -> Any:
        name = str(step.listener)
        existing = self._listeners.get(name)
        if existing is None:
            existing = kind(name)
            self._listeners[name] = existing
            self._cursors[name] = 0
        elif not isinstance(existing, kind):
            raise ScenarioError(
                f"step {index}: listener '{name}' is a {type(existing).__name__}, not a {kind.__name__}"
            )
        return existing

    def _known_listener(self, index: int, step: ScenarioStep) -> Recorder:
        name = str(step.listener)
        if name not in self._listeners:
            raise ScenarioError(f"step {index}: unknown listener '{name}'")
        return self._listeners[name]

    # ── Driver actions ───────────────────────────────────────────────

    def _do_set_ims_available(self, index: int, step: ScenarioStep) -> None:
        self.simulator.set_ims_available_on_device(bool(step.available))

    def _do_register_registration_callback(self, index: int, step: ScenarioStep) -> None:
        callback = self._listener(index, step, RecordingRegistrationCallback)
        self.simulator.register_ims_registration_callback(self.executor, callback)

    def _do_unregister_registration_callback(self, index: int, step: ScenarioStep) -> None:
        callback = self._listener(index, step, RecordingRegistrationCallback)
        self.simulator.unregister_ims_registration_callback(callback)

    def _do_register_capability_callback(self, index: int, step: ScenarioStep) -> None:
        callback = self._listener(index, step, RecordingCapabilityCallback)
        self.simulator.register_mmtel_capability_callback(self.executor, callback)

    def _do_unregister_capability_callback(self, index: int, step: ScenarioStep) -> None:
        callback = self._listener(index, step, RecordingCapabilityCallback)
        self.simulator.unregister_mmtel_capability_callback(callback)

    def _do_set_registering(self, index: int, step: ScenarioStep) -> None:
        self.simulator.set_ims_registering(step.tech)

    def _do_set_registered(self, index: int, step: ScenarioStep) -> None:
        self.simulator.set_ims_registered(step.tech)

    def _do_set_unregistered(self, index: int, step: ScenarioStep) -> None:
        self.simulator.set_ims_unregistered(step.reason or ImsReasonInfo())

    def _do_set_capabilities(self, index: int, step: ScenarioStep) -> None:
        self.simulator.set_mmtel_capabilities_available(step.capabilities)

    def _do_drain(self, index: int, step: ScenarioStep) -> None:
        if isinstance(self.executor, QueuedExecutor):
            self.executor.run_pending()

    # ── Expectations ─────────────────────────────────────────────────

    def _do_expect_events(self, index: int, step: ScenarioStep) -> None:
        recorder = self._known_listener(index, step)
        name = str(step.listener)
        seen = recorder.describe()[self._cursors[name] :]
        self._cursors[name] += len(seen)
        if seen != list(step.events or []):
            raise ScenarioAssertionError(
                index, step.action, f"listener '{name}' saw {seen}, expected {step.events}"
            )

    def _do_expect_no_events(self, index: int, step: ScenarioStep) -> None:
        recorder = self._known_listener(index, step)
        name = str(step.listener)
        seen = recorder.describe()[self._cursors[name] :]
        if seen:
            raise ScenarioAssertionError(
                index, step.action, f"listener '{name}' saw {seen}, expected nothing"
            )

    def _do_expect_tech(self, index: int, step: ScenarioStep) -> None:
        current = self.simulator.registration_tech
        if current != step.tech:
            raise ScenarioAssertionError(
                index, step.action, f"registration tech is {current.name}, expected {step.tech.name}"
            )

    def _do_expect_available(self, index: int, step: ScenarioStep) -> None:
        available = self.simulator.is_available(step.capability, step.tech)
        if step.expected is not None and available != step.expected:
            raise ScenarioAssertionError(
                index,
                step.action,
                f"is_available({step.capability.name}, {step.tech.name}) was {available}, "
                f"expected {step.expected}",
            )

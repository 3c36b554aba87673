"""Scenario script and runner tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from ims.mmtel_simulator import ImsMmTelSimulator
from ims.types import RegistrationTech
from scenario.runner import ScenarioRunner
from scenario.script import (
    ScenarioAssertionError,
    ScenarioError,
    load_scenario,
    parse_scenario,
)

SCENARIO_DIR = Path(__file__).resolve().parents[1] / "scenarios"


@pytest.mark.parametrize("path", sorted(SCENARIO_DIR.glob("*.yaml")), ids=lambda p: p.stem)
def test_bundled_scenarios_pass(path: Path) -> None:
    result = ScenarioRunner(load_scenario(path)).run()
    assert result.steps_run == len(load_scenario(path).steps)


def test_runner_reports_events_and_final_state() -> None:
    scenario = parse_scenario(
        {
            "name": "order",
            "steps": [
                {"action": "register_registration_callback", "listener": "l1"},
                {"action": "register_registration_callback", "listener": "l2"},
                {"action": "set_registered", "tech": "iwlan"},
                {"action": "expect_events", "listener": "l1", "events": ["registered:IWLAN"]},
                {"action": "unregister_registration_callback", "listener": "l1"},
                {"action": "set_unregistered"},
                {"action": "expect_no_events", "listener": "l1"},
            ],
        }
    )
    simulator = ImsMmTelSimulator()
    result = ScenarioRunner(scenario, simulator=simulator).run()

    assert result.steps_run == 7
    assert result.events == {
        "l1": ["registered:IWLAN"],
        "l2": ["registered:IWLAN", "unregistered:0"],
    }
    assert result.final_state["registration_tech"] == "NONE"
    assert simulator.registration_tech is RegistrationTech.NONE


def test_queued_scenario_needs_drain() -> None:
    scenario = parse_scenario(
        {
            "name": "queued",
            "executor": "queued",
            "steps": [
                {"action": "register_registration_callback", "listener": "a"},
                {"action": "set_registering", "tech": "LTE"},
                {"action": "expect_no_events", "listener": "a"},
                {"action": "drain"},
                {"action": "expect_events", "listener": "a", "events": ["registering:LTE"]},
            ],
        }
    )
    assert ScenarioRunner(scenario).run().steps_run == 5


def test_failed_expectation_names_the_step() -> None:
    scenario = parse_scenario(
        {
            "name": "wrong",
            "steps": [
                {"action": "register_registration_callback", "listener": "a"},
                {"action": "set_registered", "tech": "LTE"},
                {"action": "expect_tech", "tech": "NR"},
            ],
        }
    )
    with pytest.raises(ScenarioAssertionError) as excinfo:
        ScenarioRunner(scenario).run()

    assert excinfo.value.step_index == 3
    assert "expected NR" in str(excinfo.value)


def test_unexpected_simulator_error_fails_the_step() -> None:
    scenario = parse_scenario(
        {
            "name": "no-caps",
            "steps": [
                {
                    "action": "expect_available",
                    "capability": "voice",
                    "tech": "LTE",
                    "expected": False,
                }
            ],
        }
    )
    with pytest.raises(ScenarioAssertionError, match="PreconditionError"):
        ScenarioRunner(scenario).run()


def test_expected_error_that_does_not_happen_fails() -> None:
    scenario = parse_scenario(
        {
            "name": "supported",
            "steps": [
                {
                    "action": "register_capability_callback",
                    "listener": "caps",
                    "expect_error": "unsupported",
                }
            ],
        }
    )
    with pytest.raises(ScenarioAssertionError, match="ImsUnsupportedError"):
        ScenarioRunner(scenario).run()


def test_listener_kind_mismatch_is_a_scenario_error() -> None:
    scenario = parse_scenario(
        {
            "name": "mixed",
            "steps": [
                {"action": "register_registration_callback", "listener": "x"},
                {"action": "register_capability_callback", "listener": "x"},
            ],
        }
    )
    with pytest.raises(ScenarioError, match="listener 'x'"):
        ScenarioRunner(scenario).run()


@pytest.mark.parametrize(
    "step",
    [
        {"action": "set_registered"},
        {"action": "expect_events", "listener": "a"},
        {"action": "set_registered", "tech": "LTE", "expect_error": "unsupported"},
        {"action": "expect_available", "capability": "voice", "tech": "LTE"},
        {"action": "set_registered", "tech": "6G"},
        {"action": "teleport"},
        {"action": "drain", "unknown_field": 1},
    ],
)
def test_invalid_steps_are_rejected(step: dict) -> None:
    with pytest.raises(ScenarioError):
        parse_scenario({"name": "bad", "steps": [step]})


def test_load_scenario_file_errors(tmp_path: Path) -> None:
    with pytest.raises(ScenarioError, match="not found"):
        load_scenario(tmp_path / "missing.yaml")

    not_mapping = tmp_path / "list.yaml"
    not_mapping.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ScenarioError, match="mapping"):
        load_scenario(not_mapping)

    broken = tmp_path / "broken.yaml"
    broken.write_text("name: [unclosed\n", encoding="utf-8")
    with pytest.raises(ScenarioError, match="Invalid YAML"):
        load_scenario(broken)


def test_thread_executor_is_not_allowed_for_scenarios() -> None:
    scenario = parse_scenario({"name": "empty", "steps": []})
    with pytest.raises(ScenarioError, match="deterministic"):
        ScenarioRunner(scenario, default_executor="thread")

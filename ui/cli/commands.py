"""Typer command handlers."""

from __future__ import annotations

import json
from pathlib import Path

import typer

from core.orchestrator import Orchestrator, SimulatorBundle
from core.policy_runtime import configure_logging
from scenario.runner import ScenarioRunner
from scenario.script import ScenarioAssertionError, ScenarioError, load_scenario


def _runtime(root: Path | None = None, audit_log: Path | None = None) -> SimulatorBundle:
    return Orchestrator(root=root).build(audit_log_path=audit_log)


def run_scenario(
    scenario: Path,
    audit_log: Path | None = None,
    verbose: bool = False,
    root: Path | None = None,
) -> None:
    """Run one scenario file."""
    try:
        bundle = _runtime(root=root, audit_log=audit_log)
        configure_logging(bundle.config, verbose=verbose)
    except (OSError, ValueError) as exc:
        typer.echo(f"ERROR config: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    try:
        script = load_scenario(scenario)
        result = ScenarioRunner(
            script,
            simulator=bundle.simulator,
            default_executor=bundle.default_executor,
        ).run()
    except ScenarioAssertionError as exc:
        typer.echo(f"FAILED {scenario.name}: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except ScenarioError as exc:
        typer.echo(f"ERROR {scenario.name}: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    except Exception as exc:
        # raised by a listener through an inline executor
        typer.echo(f"FAILED {scenario.name}: {type(exc).__name__}: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(f"Scenario: {result.name}")
    typer.echo(f"Steps: {result.steps_run} | Passed: True")
    typer.echo(f"Final state: {json.dumps(result.final_state)}")
    for name, events in result.events.items():
        typer.echo(f"- {name}: {', '.join(events) if events else '(no events)'}")
    if bundle.audit_logger is not None:
        typer.echo(f"Audit log: {bundle.audit_logger.log_path}")


def validate_scenario(scenario: Path) -> None:
    """Parse a scenario file and report its step count."""
    try:
        script = load_scenario(scenario)
    except ScenarioError as exc:
        typer.echo(f"ERROR {scenario.name}: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    typer.echo(f"{script.name}: {len(script.steps)} steps OK")


def config_show(root: Path | None = None) -> None:
    """Show effective runtime config."""
    try:
        bundle = _runtime(root=root)
    except (OSError, ValueError) as exc:
        typer.echo(f"ERROR config: {exc}", err=True)
        raise typer.Exit(code=2) from exc
    typer.echo(json.dumps(bundle.config, indent=2, default=str))

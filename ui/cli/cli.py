"""CLI entrypoint for the IMS MmTel simulator."""

from __future__ import annotations

from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="IMS MmTel registration & capability simulator")
config_app = typer.Typer(help="Configuration commands")


@app.command("run")
def run_cmd(
    scenario: Path = typer.Argument(..., help="Scenario YAML file"),
    audit_log: Path | None = typer.Option(None, "--audit-log", help="Write trace events as JSONL"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    root: Path | None = typer.Option(None, "--root", help="Directory holding config/"),
) -> None:
    """Run a scenario and check its expectations."""
    commands.run_scenario(scenario=scenario, audit_log=audit_log, verbose=verbose, root=root)


@app.command("validate")
def validate_cmd(scenario: Path = typer.Argument(..., help="Scenario YAML file")) -> None:
    """Parse a scenario without running it."""
    commands.validate_scenario(scenario=scenario)


@config_app.command("show")
def config_show_cmd(
    root: Path | None = typer.Option(None, "--root", help="Directory holding config/"),
) -> None:
    """Show effective configuration."""
    commands.config_show(root=root)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()

"""Config loading, event bus and orchestrator tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.event_bus import ALL_EVENTS, EventBus
from core.orchestrator import Orchestrator
from core.policy_runtime import load_effective_config, load_yaml, merge_dicts
from executor.callback_executors import InlineExecutor
from ims.errors import ImsUnsupportedError
from ims.recorders import RecordingRegistrationCallback


def write_config(root: Path, default: str, permissions: str = "") -> None:
    config_dir = root / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "default.yaml").write_text(default, encoding="utf-8")
    if permissions:
        (config_dir / "permissions.yaml").write_text(permissions, encoding="utf-8")


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts({"a": {"x": 1, "y": 2}, "b": 1}, {"a": {"y": 3}, "c": 4})
    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}


def test_load_yaml_missing_and_invalid(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "missing.yaml") == {}
    bad = tmp_path / "bad.yaml"
    bad.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(bad)


def test_effective_config_falls_back_to_defaults(tmp_path: Path) -> None:
    config = load_effective_config(tmp_path)

    assert config["simulator"]["ims_available_on_device"] is True
    assert config["simulator"]["default_executor"] == "inline"
    assert config["permissions"] == {}


def test_orchestrator_applies_config_and_audit(tmp_path: Path) -> None:
    write_config(
        tmp_path,
        "simulator:\n  ims_available_on_device: false\n  default_executor: queued\n"
        "audit:\n  enabled: true\npaths:\n  audit_log_path: out/audit.jsonl\n",
    )
    bundle = Orchestrator(root=tmp_path).build()

    assert bundle.default_executor == "queued"
    assert bundle.audit_logger is not None
    with pytest.raises(ImsUnsupportedError):
        bundle.simulator.register_ims_registration_callback(
            InlineExecutor(), RecordingRegistrationCallback()
        )

    records = (tmp_path / "out" / "audit.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(records[0])["event"] == "callback_rejected"


def test_orchestrator_without_audit(tmp_path: Path) -> None:
    bundle = Orchestrator(root=tmp_path).build()

    assert bundle.audit_logger is None
    assert bundle.simulator.event_bus is bundle.event_bus
    assert bundle.simulator.permissions is bundle.permissions


def test_event_bus_named_and_wildcard_handlers() -> None:
    bus = EventBus()
    named: list[dict] = []
    everything: list[dict] = []
    bus.subscribe("registering", named.append)
    bus.subscribe(ALL_EVENTS, everything.append)

    bus.emit("registering", {"tech": "LTE"})
    bus.emit("other", {})
    bus.unsubscribe("registering", named.append)
    bus.emit("registering", {"tech": "NR"})

    assert named == [{"tech": "LTE"}]
    assert everything == [
        {"event": "registering", "tech": "LTE"},
        {"event": "other"},
        {"event": "registering", "tech": "NR"},
    ]


@pytest.mark.parametrize("executor", ["thread", "eager"])
def test_unknown_default_executor_is_a_config_error(tmp_path: Path, executor: str) -> None:
    write_config(tmp_path, f"simulator:\n  default_executor: {executor}\n")

    with pytest.raises(ValueError, match="default_executor must be one of inline, queued"):
        load_effective_config(tmp_path)
    with pytest.raises(ValueError):
        Orchestrator(root=tmp_path).build()


def test_bundled_default_config_is_valid() -> None:
    root = Path(__file__).resolve().parents[1]
    config = load_effective_config(root)

    assert config["simulator"]["default_executor"] in ("inline", "queued")

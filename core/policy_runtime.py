"""Configuration and runtime bootstrapping."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "simulator": {
        "ims_available_on_device": True,
        "default_executor": "inline",
    },
    "audit": {"enabled": False},
    "paths": {"audit_log_path": "logs/ims_audit.jsonl"},
    "logging": {"level": "WARNING"},
}

DEFAULT_EXECUTORS = ("inline", "queued")


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def ensure_runtime_dirs(root: Path, config: dict[str, Any]) -> dict[str, Path]:
    """Ensure the audit log directory exists and return resolved paths."""
    paths_cfg = config.get("paths", {})
    audit_log_path = (root / paths_cfg.get("audit_log_path", "logs/ims_audit.jsonl")).resolve()
    audit_log_path.parent.mkdir(parents=True, exist_ok=True)
    return {"audit_log_path": audit_log_path}


def load_effective_config(root: Path) -> dict[str, Any]:
    """Load and merge all runtime configuration files."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    permissions_cfg = load_yaml(config_dir / "permissions.yaml")

    merged = merge_dicts(DEFAULT_CONFIG, default_cfg)
    merged["permissions"] = permissions_cfg
    validate_config(merged)
    return merged


def validate_config(config: dict[str, Any]) -> None:
    """Reject settings the scenario runner cannot honour."""
    executor = config.get("simulator", {}).get("default_executor", "inline")
    if executor not in DEFAULT_EXECUTORS:
        raise ValueError(
            f"simulator.default_executor must be one of {', '.join(DEFAULT_EXECUTORS)}; "
            f"got {executor!r}"
        )


def configure_logging(config: dict[str, Any], verbose: bool = False) -> None:
    """Configure root logging for command-line use."""
    level_name = "DEBUG" if verbose else str(config.get("logging", {}).get("level", "WARNING"))
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

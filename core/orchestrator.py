"""Top-level wiring of a configured simulator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.event_bus import ALL_EVENTS, EventBus
from core.policy_runtime import ensure_runtime_dirs, load_effective_config
from governance.audit_logger import AuditLogger
from governance.permission_engine import PermissionEngine
from ims.mmtel_simulator import ImsMmTelSimulator


@dataclass
class SimulatorBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    simulator: ImsMmTelSimulator
    event_bus: EventBus
    permissions: PermissionEngine
    audit_logger: AuditLogger | None = None

    @property
    def default_executor(self) -> str:
        return str(self.config.get("simulator", {}).get("default_executor", "inline"))


class Orchestrator:
    """Creates and wires simulator components for CLI and scenario use."""

    def __init__(self, root: Path | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()

    def build(self, audit_log_path: Path | None = None) -> SimulatorBundle:
        """Build a simulator from config; an explicit audit path enables auditing."""
        config = load_effective_config(self.root)
        sim_cfg = config.get("simulator", {})

        event_bus = EventBus()
        permissions = PermissionEngine(config=self._permissions(config))
        simulator = ImsMmTelSimulator(
            ims_available_on_device=bool(sim_cfg.get("ims_available_on_device", True)),
            permissions=permissions,
            event_bus=event_bus,
        )

        audit_logger = None
        if audit_log_path is not None:
            audit_logger = AuditLogger(audit_log_path)
        elif config.get("audit", {}).get("enabled", False):
            paths = ensure_runtime_dirs(self.root, config)
            audit_logger = AuditLogger(paths["audit_log_path"])
        if audit_logger is not None:
            event_bus.subscribe(ALL_EVENTS, audit_logger.handle)

        return SimulatorBundle(
            config=config,
            simulator=simulator,
            event_bus=event_bus,
            permissions=permissions,
            audit_logger=audit_logger,
        )

    @staticmethod
    def _permissions(config: dict[str, Any]) -> dict[str, Any]:
        return dict(config.get("permissions", {}))

"""Permission policy for privileged simulator operations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

READ_PRIVILEGED_PHONE_STATE = "android.permission.READ_PRIVILEGED_PHONE_STATE"


@dataclass
class PermissionDecision:
    """Represents allow/block decision."""

    allowed: bool
    reason: str


class PermissionEngine:
    """Decides whether the calling test holds a permission.

    Grants everything unless configured otherwise, which is what a test
    context normally wants. Explicit revocations always win.
    """

    def __init__(self, config: dict[str, Any] | None = None) -> None:
        cfg = config or {}
        self.grant_all = bool(cfg.get("grant_all", True))
        self.granted = set(cfg.get("granted_permissions", []))
        self.revoked = set(cfg.get("revoked_permissions", []))

    @classmethod
    def from_yaml(cls, path: Path) -> PermissionEngine:
        """Build engine from YAML file path."""
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValueError("permissions.yaml must be a mapping.")
        return cls(config=data)

    def check(self, *, permission: str, operation: str) -> PermissionDecision:
        """Evaluate policy for an operation guarded by ``permission``."""
        if permission in self.revoked:
            return PermissionDecision(False, f"{operation} requires {permission} (revoked).")
        if self.grant_all:
            return PermissionDecision(True, "All permissions granted.")
        if permission in self.granted:
            return PermissionDecision(True, f"{permission} granted.")
        return PermissionDecision(False, f"{operation} requires {permission}.")

    def grant(self, permission: str) -> None:
        self.revoked.discard(permission)
        self.granted.add(permission)

    def revoke(self, permission: str) -> None:
        self.granted.discard(permission)
        self.revoked.add(permission)

"""Structured JSONL audit log of simulator trace events."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def _json_safe(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_json_safe(v) for v in value]
    return value


class AuditLogger:
    """Writes simulator events as JSON lines."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("imssim.audit")

    def log(self, event: str, payload: dict[str, Any]) -> None:
        """Append one JSONL audit event."""
        record = {
            "timestamp": datetime.now(UTC).isoformat(),
            "event": event,
            "payload": _json_safe(payload),
        }
        line = json.dumps(record, ensure_ascii=True, default=str)
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(line + "\n")
        self.logger.debug(line)

    def handle(self, tagged_payload: dict[str, Any]) -> None:
        """Event bus handler for ``"*"`` subscriptions."""
        payload = dict(tagged_payload)
        event = str(payload.pop("event", "unknown"))
        self.log(event, payload)

"""Session audit trail.

One JSON Lines entry per message the server acts on: the method, the
request id, the session state the message arrived in, and what the
server answered. Protocol errors are recorded with their JSON-RPC code;
tool calls also carry the tool name, redacted arguments and whether the
tool reported an error.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

REDACTED = "[REDACTED]"

# Argument keys whose values never reach the audit file
SENSITIVE_KEY = re.compile(
    r"pass(word|phrase)?|secret|token|api[_-]?key|auth|credential|private[_-]?key|cookie",
    re.IGNORECASE,
)


class Outcome(Enum):
    """What the server sent back for an audited message."""

    RESULT = "result"
    ERROR = "error"
    NO_RESPONSE = "no_response"


def redact(value: Any) -> Any:
    """Return a copy of a JSON value with sensitive keys masked at any depth."""
    if isinstance(value, dict):
        return {
            key: REDACTED if SENSITIVE_KEY.search(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


@dataclass
class AuditRecord:
    """One audited exchange.

    ``method`` is None when the message could not be decoded far enough
    to read it (parse errors).
    """

    method: str | None
    request_id: int | None
    state: str
    outcome: Outcome = Outcome.NO_RESPONSE
    error_code: int | None = None
    duration_ms: float = 0.0
    tool_name: str | None = None
    tool_arguments: dict[str, Any] | None = None
    tool_is_error: bool | None = None

    def to_dict(self) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(timespec="milliseconds").replace(
                "+00:00", "Z"
            ),
            "method": self.method,
            "id": self.request_id,
            "state": self.state,
            "outcome": self.outcome.value,
            "duration_ms": round(self.duration_ms, 3),
        }
        if self.error_code is not None:
            entry["error_code"] = self.error_code
        if self.tool_name is not None:
            entry["tool"] = {
                "name": self.tool_name,
                "arguments": redact(self.tool_arguments or {}),
                "is_error": bool(self.tool_is_error),
            }
        return entry


class AuditLogger:
    """Appends audit records to a JSON Lines file, flushing every entry."""

    def __init__(self, log_path: Path) -> None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = log_path.open("a", encoding="utf-8")

    def record(self, entry: AuditRecord) -> None:
        self._file.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> AuditLogger:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

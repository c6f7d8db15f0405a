"""Tests for the session audit trail."""

import json
from datetime import datetime
from pathlib import Path

from mcp_lite.audit import REDACTED, AuditLogger, AuditRecord, Outcome, redact


class TestRedact:
    """Tests for argument redaction."""

    def test_masks_sensitive_keys(self):
        args = {
            "query": "normal query",
            "password": "secret123",
            "api_key": "sk-12345",
            "Authorization": "bearer-xyz",
        }

        assert redact(args) == {
            "query": "normal query",
            "password": REDACTED,
            "api_key": REDACTED,
            "Authorization": REDACTED,
        }

    def test_masks_inside_nested_objects_and_lists(self):
        value = {"accounts": [{"user": "ada", "token": "t"}], "options": {"secret": 1}}

        assert redact(value) == {
            "accounts": [{"user": "ada", "token": REDACTED}],
            "options": {"secret": REDACTED},
        }

    def test_leaves_input_untouched(self):
        args = {"secret": "keep"}

        redact(args)

        assert args == {"secret": "keep"}


class TestAuditRecord:
    """Tests for audit entry serialization."""

    def test_protocol_error_entry(self):
        record = AuditRecord(
            method="tools/list",
            request_id=4,
            state="initializing",
            outcome=Outcome.ERROR,
            error_code=-32002,
            duration_ms=0.12345,
        )

        entry = record.to_dict()

        assert entry["method"] == "tools/list"
        assert entry["id"] == 4
        assert entry["state"] == "initializing"
        assert entry["outcome"] == "error"
        assert entry["error_code"] == -32002
        assert entry["duration_ms"] == 0.123
        assert "tool" not in entry

    def test_tool_call_entry(self):
        record = AuditRecord(
            method="tools/call",
            request_id=9,
            state="initialized",
            outcome=Outcome.RESULT,
            tool_name="greet",
            tool_arguments={"name": "Ada", "token": "abc"},
            tool_is_error=False,
        )

        entry = record.to_dict()

        assert "error_code" not in entry
        assert entry["tool"] == {
            "name": "greet",
            "arguments": {"name": "Ada", "token": REDACTED},
            "is_error": False,
        }

    def test_timestamp_is_iso8601_utc(self):
        timestamp = AuditRecord(method=None, request_id=None, state="uninitialized").to_dict()[
            "timestamp"
        ]

        assert timestamp.endswith("Z")
        assert datetime.fromisoformat(timestamp.replace("Z", "+00:00")).tzinfo is not None


class TestAuditLogger:
    """Tests for the JSON Lines writer."""

    def test_creates_log_directory_if_missing(self, tmp_path: Path):
        log_path = tmp_path / "subdir" / "audit.jsonl"

        with AuditLogger(log_path):
            assert log_path.parent.exists()

    def test_writes_one_line_per_record(self, tmp_path: Path):
        log_path = tmp_path / "audit.jsonl"

        with AuditLogger(log_path) as logger:
            logger.record(AuditRecord(method="initialize", request_id=1, state="uninitialized"))
            logger.record(AuditRecord(method="add", request_id=2, state="initialized"))

        lines = log_path.read_text().splitlines()
        assert [json.loads(line)["method"] for line in lines] == ["initialize", "add"]

    def test_flushes_each_record(self, tmp_path: Path):
        log_path = tmp_path / "audit.jsonl"
        logger = AuditLogger(log_path)

        logger.record(AuditRecord(method="tools/list", request_id=3, state="initialized"))
        assert "tools/list" in log_path.read_text()

        logger.close()

    def test_appends_to_existing_log(self, tmp_path: Path):
        log_path = tmp_path / "audit.jsonl"

        with AuditLogger(log_path) as logger:
            logger.record(AuditRecord(method="first", request_id=1, state="initialized"))
        with AuditLogger(log_path) as logger:
            logger.record(AuditRecord(method="second", request_id=2, state="initialized"))

        assert len(log_path.read_text().splitlines()) == 2

    def test_close_is_idempotent(self, tmp_path: Path):
        logger = AuditLogger(tmp_path / "audit.jsonl")

        logger.close()
        logger.close()

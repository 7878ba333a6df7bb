"""
Tests for the audit ledger.
"""

import json
from pathlib import Path

from cfgd.core.persistence.audit import AuditEntry, AuditWriter


def _lines(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text().splitlines()]


class TestAuditWriter:
    def test_appends_in_order(self, tmp_path: Path):
        path = tmp_path / "audit.ndjson"
        writer = AuditWriter(path)
        writer.write(AuditEntry(operation_id="op-1", domains=["ntp"], status="ok"))
        writer.write(AuditEntry(operation_id="op-2", domains=["dns"], status="partial"))

        entries = _lines(path)
        assert [e["operation_id"] for e in entries] == ["op-1", "op-2"]
        assert entries[1]["status"] == "partial"
        assert entries[1]["domains"] == ["dns"]

    def test_ndjson_format(self, tmp_path: Path):
        path = tmp_path / "audit.ndjson"
        AuditWriter(path).write(AuditEntry(operation_id="op-1", errors=["eth0: boom"]))
        lines = path.read_text().splitlines()
        assert len(lines) == 1
        record = json.loads(lines[0])
        assert record["operation_id"] == "op-1"
        assert record["errors"] == ["eth0: boom"]
        assert "timestamp" in record

    def test_creates_parent_dir(self, tmp_path: Path):
        writer = AuditWriter(tmp_path / "a" / "b" / "audit.ndjson")
        writer.write(AuditEntry(operation_id="op-1"))
        assert writer.path.is_file()

    def test_existing_entries_untouched(self, tmp_path: Path):
        path = tmp_path / "audit.ndjson"
        path.write_text('{"operation_id": "old"}\n')
        AuditWriter(path).write(AuditEntry(operation_id="op-1"))
        assert [e["operation_id"] for e in _lines(path)] == ["old", "op-1"]

    def test_write_failure_does_not_raise(self, tmp_path: Path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        AuditWriter(blocker / "audit.ndjson").write(AuditEntry(operation_id="op-1"))

"""
Audit ledger — append-only reconciliation log.

Every reconciliation pass can append an entry to an NDJSON
(newline-delimited JSON) file: what was applied, how it went and which
steps failed. The ledger is append-only: entries are never modified.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class AuditEntry(BaseModel):
    """A single audit log entry."""

    timestamp: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())
    operation_id: str = ""

    # What was applied
    domains: list[str] = Field(default_factory=list)

    # Results
    status: str = ""               # ok, partial, failed
    steps_total: int = 0
    steps_succeeded: int = 0
    steps_failed: int = 0
    duration_ms: int = 0

    errors: list[str] = Field(default_factory=list)


class AuditWriter:
    """Append-only audit ledger writer.

    Each call to write() appends a single JSON line to the ledger file.
    The file and its directory are created if they don't exist.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, entry: AuditEntry) -> None:
        """Append an audit entry. Failures are logged, never raised."""
        data = entry.model_dump(mode="json")
        line = json.dumps(data, ensure_ascii=False) + "\n"

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as f:
                f.write(line)
            logger.debug("Audit entry written: %s", entry.operation_id)
        except OSError as e:
            logger.error("Failed to write audit entry: %s", e)

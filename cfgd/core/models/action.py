"""
Receipt and ApplyResult models — the side-effect contract.

Every side-effecting step (writing an artifact, removing stale files,
running a command) returns a Receipt. Renderers collect their receipts
into an ApplyResult. Adapters never raise; failures are captured here
so the orchestrator can report partial failure instead of losing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class ErrorKind(str, Enum):
    """Why a step failed."""

    WRITE_FAILED = "write-failed"
    COMMAND_FAILED = "command-failed"
    UNSAFE_INPUT = "unsafe-input"
    INTERNAL = "internal-error"


class Receipt(BaseModel):
    """Result of one side-effecting step.

    ``step`` names the kind of operation (write, remove, mkdir, command,
    lookup, validate) and ``target`` what it acted on: a file path or the
    command line.
    """

    step: str
    target: str = ""
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None
    error_kind: ErrorKind | None = None
    return_code: int | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the step failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        step: str,
        target: str = "",
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(step=step, target=target, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        step: str,
        target: str,
        error: str,
        error_kind: ErrorKind,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            step=step,
            target=target,
            status="failed",
            error=error,
            error_kind=error_kind,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        step: str,
        target: str = "",
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt (deliberate no-op)."""
        return cls(step=step, target=target, status="skipped", output=reason, **kwargs)


def aggregate_status(succeeded: int, failed: int) -> str:
    """Fold success/failure counts into ok, partial or failed."""
    if failed == 0:
        return "ok"
    if succeeded > 0:
        return "partial"
    return "failed"


@dataclass
class ApplyResult:
    """Outcome of one renderer over one configuration domain."""

    domain: str = ""
    receipts: list[Receipt] = field(default_factory=list)

    def add(self, receipt: Receipt) -> Receipt:
        self.receipts.append(receipt)
        return receipt

    def extend(self, other: ApplyResult) -> None:
        self.receipts.extend(other.receipts)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def status(self) -> str:
        return aggregate_status(self.succeeded, self.failed)

    @property
    def errors(self) -> list[str]:
        return [f"{r.target}: {r.error}" for r in self.receipts if r.failed]

    def commands(self) -> list[str]:
        """Command lines issued, in order."""
        return [r.target for r in self.receipts if r.step == "command"]

    def to_dict(self) -> dict:
        return {
            "domain": self.domain,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }

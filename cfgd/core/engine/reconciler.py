"""
Reconciler — the single entry point the configuration transport drives.

Takes a configuration snapshot (or a bare sub-tree), dispatches every
present sub-tree to its renderer in a fixed order, and folds the
per-renderer results into one report for the caller.

Flow:
    change → normalise to snapshot → ntp → dns → interfaces → neighbors
           → authentication → values → report → audit
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from cfgd.core.models.action import ApplyResult, ErrorKind, Receipt, aggregate_status
from cfgd.core.models.config import (
    AuthConfig,
    ConfigSnapshot,
    DnsConfig,
    InterfaceList,
    NtpConfig,
)
from cfgd.core.models.template import GeneratedFile
from cfgd.core.persistence.audit import AuditEntry, AuditWriter
from cfgd.core.services.authentication import apply_authentication
from cfgd.core.services.renderers.base import RenderContext
from cfgd.core.services.renderers.hostname import apply_value
from cfgd.core.services.renderers.neighbor import apply_neighbors
from cfgd.core.services.renderers.network import apply_network, render_interface
from cfgd.core.services.renderers.ntp import apply_ntp, render_ntp
from cfgd.core.services.renderers.resolver import apply_resolver, render_resolver
from cfgd.core.services.renderers.ssh_keys import render_authorized_keys, resolve_key_file

logger = logging.getLogger(__name__)

ConfigChange = ConfigSnapshot | NtpConfig | DnsConfig | InterfaceList | AuthConfig


@dataclass
class ReconcileReport:
    """Outcome of one reconciliation pass."""

    operation_id: str = ""
    results: list[ApplyResult] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def domains(self) -> list[str]:
        return [r.domain for r in self.results]

    @property
    def total(self) -> int:
        return sum(r.total for r in self.results)

    @property
    def succeeded(self) -> int:
        return sum(r.succeeded for r in self.results)

    @property
    def failed(self) -> int:
        return sum(r.failed for r in self.results)

    @property
    def status(self) -> str:
        return aggregate_status(self.succeeded, self.failed)

    @property
    def errors(self) -> list[str]:
        return [err for r in self.results for err in r.errors]

    def result(self, domain: str) -> ApplyResult | None:
        for r in self.results:
            if r.domain == domain:
                return r
        return None

    def commands(self) -> list[str]:
        return [cmd for r in self.results for cmd in r.commands()]

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "duration_ms": self.duration_ms,
            "results": [r.to_dict() for r in self.results],
        }


def as_snapshot(change: ConfigChange) -> ConfigSnapshot:
    """Wrap a bare sub-tree into a snapshot carrying only that sub-tree."""
    if isinstance(change, ConfigSnapshot):
        return change
    if isinstance(change, NtpConfig):
        return ConfigSnapshot(ntp=change)
    if isinstance(change, DnsConfig):
        return ConfigSnapshot(dns=change)
    if isinstance(change, InterfaceList):
        return ConfigSnapshot(interfaces=change)
    if isinstance(change, AuthConfig):
        return ConfigSnapshot(authentication=change)
    raise TypeError(f"Unsupported configuration change: {type(change).__name__}")


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"


class Reconciler:
    """Applies configuration changes and reports the outcome.

    Holds no configuration between calls: each delivery is applied in
    full for the sub-trees it carries and then forgotten.
    """

    def __init__(self, ctx: RenderContext, audit: AuditWriter | None = None):
        self._ctx = ctx
        self._audit = audit

    @property
    def context(self) -> RenderContext:
        return self._ctx

    def deliver(self, change: ConfigChange) -> ReconcileReport:
        """Apply one configuration change. Never raises for system failures."""
        snapshot = as_snapshot(change)
        report = ReconcileReport(operation_id=generate_operation_id())
        start = time.monotonic()

        logger.info(
            "Reconciliation %s: %s",
            report.operation_id,
            ", ".join(snapshot.domains) or "nothing to apply",
        )

        for domain, step in self._plan(snapshot):
            report.results.append(self._run_step(domain, step))

        report.duration_ms = int((time.monotonic() - start) * 1000)

        for result in report.results:
            status_marker = {"ok": "✓", "partial": "~", "failed": "✗"}[result.status]
            log = logger.info if result.status == "ok" else logger.warning
            log("%s %s → %s", status_marker, result.domain, result.status)
            for error in result.errors:
                logger.warning("    %s", error)

        logger.info(
            "Reconciliation %s finished: %s (%d/%d steps ok)",
            report.operation_id,
            report.status,
            report.succeeded,
            report.total,
        )

        if self._audit is not None:
            self._write_audit(self._audit, report)

        return report

    def apply_value(self, path: str, value: str) -> ApplyResult:
        """Apply a single dotted-path change outside a snapshot."""
        return self._run_step(path, lambda: apply_value(path, value, self._ctx))

    def render(self, change: ConfigChange) -> list[GeneratedFile]:
        """Preview the artifacts a delivery would write. No side effects.

        Raises:
            ValueError: An interface address is malformed.
        """
        snapshot = as_snapshot(change)
        ctx = self._ctx
        files: list[GeneratedFile] = []

        if snapshot.ntp is not None:
            files.append(render_ntp(snapshot.ntp, ctx))
        if snapshot.dns is not None:
            files.append(render_resolver(snapshot.dns, ctx))
        if snapshot.interfaces is not None:
            files.extend(render_interface(iface, ctx) for iface in snapshot.interfaces)
        if snapshot.authentication is not None:
            for user in snapshot.authentication.users:
                path, _ = resolve_key_file(user, ctx)
                if path is not None:
                    files.append(render_authorized_keys(user, path))

        return files

    def _plan(self, snapshot: ConfigSnapshot) -> list[tuple[str, Callable[[], ApplyResult]]]:
        ctx = self._ctx
        steps: list[tuple[str, Callable[[], ApplyResult]]] = []

        if snapshot.ntp is not None:
            ntp = snapshot.ntp
            steps.append(("ntp", lambda: apply_ntp(ntp, ctx)))
        if snapshot.dns is not None:
            dns = snapshot.dns
            steps.append(("dns", lambda: apply_resolver(dns, ctx)))
        if snapshot.interfaces is not None:
            interfaces = snapshot.interfaces
            steps.append(("interfaces", lambda: apply_network(interfaces, ctx)))
            steps.append(("neighbors", lambda: apply_neighbors(interfaces, ctx)))
        if snapshot.authentication is not None:
            auth = snapshot.authentication
            steps.append(("authentication", lambda: apply_authentication(auth, ctx)))
        for path, value in snapshot.values.items():
            steps.append((path, lambda p=path, v=value: apply_value(p, v, ctx)))

        return steps

    def _run_step(self, domain: str, step: Callable[[], ApplyResult]) -> ApplyResult:
        try:
            return step()
        except Exception as e:
            # A renderer bug becomes a failed result; the daemon keeps running
            logger.exception("Renderer for %s raised", domain)
            result = ApplyResult(domain=domain)
            result.add(
                Receipt.failure(
                    step="render",
                    target=domain,
                    error=f"Unexpected error: {e}",
                    error_kind=ErrorKind.INTERNAL,
                )
            )
            return result

    @staticmethod
    def _write_audit(audit: AuditWriter, report: ReconcileReport) -> None:
        audit.write(
            AuditEntry(
                operation_id=report.operation_id,
                domains=report.domains,
                status=report.status,
                steps_total=report.total,
                steps_succeeded=report.succeeded,
                steps_failed=report.failed,
                duration_ms=report.duration_ms,
                errors=report.errors,
            )
        )

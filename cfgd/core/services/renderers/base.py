"""
Render context — everything a renderer needs to touch the system.

Renderers receive collaborators explicitly instead of reaching for
module globals, so each one can be exercised against a temporary
directory and a mock runner.
"""

from __future__ import annotations

import pwd
from collections.abc import Callable
from dataclasses import dataclass, field

from cfgd import IDENT
from cfgd.adapters.base import CommandRunner
from cfgd.adapters.shell.filesystem import ArtifactWriter
from cfgd.core.models.action import ApplyResult, ErrorKind, Receipt
from cfgd.core.models.settings import ServiceNames, ServiceTarget, SystemPaths

AccountLookup = Callable[[str], "pwd.struct_passwd | None"]


def lookup_account(name: str) -> pwd.struct_passwd | None:
    """Resolve a system account, or None when it does not exist."""
    try:
        return pwd.getpwnam(name)
    except KeyError:
        return None


@dataclass
class RenderContext:
    runner: CommandRunner
    writer: ArtifactWriter = field(default_factory=ArtifactWriter)
    paths: SystemPaths = field(default_factory=SystemPaths)
    services: ServiceNames = field(default_factory=ServiceNames)
    account_lookup: AccountLookup = lookup_account
    hostname_enabled: bool = True
    ident: str = IDENT

    @property
    def header(self) -> str:
        return f"# AUTOGENERATED BY {self.ident}\n"

    def systemctl(self, verb: str, target: ServiceTarget) -> Receipt:
        """Issue ``systemctl <verb> <unit>`` for a logical service."""
        return self.runner.run(["systemctl", verb, self.services.unit(target)])


def rejected(result: ApplyResult, target: str, error: str) -> Receipt:
    """Record an unsafe-input rejection on ``result``."""
    return result.add(
        Receipt.failure(
            step="validate",
            target=target,
            error=error,
            error_kind=ErrorKind.UNSAFE_INPUT,
        )
    )

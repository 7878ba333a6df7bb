"""
Mock runner — test double for every command cfgd issues.

Used by the test-suite and by ``--mock`` mode to exercise the full
reconciliation pipeline without touching the service manager or the
neighbor table. Records every argv and can be told to fail commands
whose command line starts with a given prefix.
"""

from __future__ import annotations

import shlex
from collections.abc import Sequence

from cfgd.adapters.base import CommandRunner
from cfgd.core.models.action import ErrorKind, Receipt


class MockCommandRunner(CommandRunner):
    """Records commands instead of running them.

    By default every command succeeds.
    """

    def __init__(self, runner_name: str = "mock", available: bool = True):
        self._name = runner_name
        self._available = available
        self._failures: dict[str, tuple[int, str]] = {}
        self._calls: list[list[str]] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def calls(self) -> list[list[str]]:
        """Every argv this mock has received, in order."""
        return self._calls

    @property
    def commands(self) -> list[str]:
        """Every command line this mock has received, in order."""
        return [shlex.join(argv) for argv in self._calls]

    @property
    def call_count(self) -> int:
        return len(self._calls)

    def is_available(self, program: str) -> bool:
        return self._available

    def set_failure(self, prefix: str, return_code: int = 1, error: str = "Mock failure") -> None:
        """Fail every command whose command line starts with ``prefix``."""
        self._failures[prefix] = (return_code, error)

    def run(self, argv: Sequence[str]) -> Receipt:
        args = [str(a) for a in argv]
        self._calls.append(args)
        command = shlex.join(args)

        for prefix, (code, error) in self._failures.items():
            if command.startswith(prefix):
                return Receipt.failure(
                    step="command",
                    target=command,
                    error=error,
                    error_kind=ErrorKind.COMMAND_FAILED,
                    return_code=code,
                    metadata={"mock": True},
                )

        return Receipt.success(
            step="command",
            target=command,
            output="[mock] executed",
            return_code=0,
            metadata={"mock": True},
        )

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._calls.clear()
        self._failures.clear()

"""
Shell command adapter — run external programs and capture their status.

This is the only place cfgd spawns processes. Commands are always an
argument vector handed straight to the kernel (``shell=False``), so no
configuration value is ever re-interpreted by a command interpreter.
"""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import time
from collections.abc import Sequence

from cfgd.adapters.base import CommandRunner
from cfgd.core.models.action import ErrorKind, Receipt

logger = logging.getLogger(__name__)


class ShellCommandRunner(CommandRunner):
    """Execute programs synchronously and return receipts.

    The command line is logged before execution, and again afterwards
    with its exit code and error description.
    """

    def __init__(self, timeout: float | None = None):
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self, program: str) -> bool:
        return shutil.which(program) is not None

    def run(self, argv: Sequence[str]) -> Receipt:
        args = [str(a) for a in argv]
        command = shlex.join(args)

        logger.info("cmd=[%s]", command)
        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.info("cmd=[%s], rc=-1, error=timed out after %ss", command, self._timeout)
            return Receipt.failure(
                step="command",
                target=command,
                error=f"Command timed out after {self._timeout}s",
                error_kind=ErrorKind.COMMAND_FAILED,
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except OSError as e:
            logger.info("cmd=[%s], rc=-1, error=%s", command, e.strerror or e)
            return Receipt.failure(
                step="command",
                target=command,
                error=f"Cannot execute {args[0] if args else '<empty>'}: {e.strerror or e}",
                error_kind=ErrorKind.COMMAND_FAILED,
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout.strip()
        stderr = result.stderr.strip()

        logger.info(
            "cmd=[%s], rc=%d, error=%s",
            command,
            result.returncode,
            stderr.splitlines()[-1] if stderr else "none",
        )

        if result.returncode == 0:
            return Receipt.success(
                step="command",
                target=command,
                output=output,
                return_code=0,
                duration_ms=elapsed_ms,
                metadata={"stderr": stderr} if stderr else {},
            )

        return Receipt.failure(
            step="command",
            target=command,
            error=stderr or f"Command exited with code {result.returncode}",
            error_kind=ErrorKind.COMMAND_FAILED,
            return_code=result.returncode,
            duration_ms=elapsed_ms,
            metadata={"stdout": output} if output else {},
        )

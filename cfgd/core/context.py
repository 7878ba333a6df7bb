"""
Daemon context — the only process-wide mutable state cfgd keeps.

Two things change while the daemon runs: the log verbosity (toggled by
SIGUSR2) and the lifecycle phase (Running → ShuttingDown on a
termination signal). Both live here, in one object created at startup
and injected into the event loop, rather than in module globals.

Design notes:
    - ShuttingDown is terminal; there is no way back to Running.
    - The log level toggles between exactly two levels, INFO and DEBUG.
"""

from __future__ import annotations

import logging
from enum import Enum

from cfgd.core.observability.logging_config import set_level

logger = logging.getLogger(__name__)


class DaemonPhase(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting-down"


class DaemonContext:
    """Log level and lifecycle phase for one daemon process."""

    def __init__(self, log_level: int = logging.INFO, apply_level: bool = True):
        self._log_level = log_level
        self._apply_level = apply_level
        self._phase = DaemonPhase.STARTING
        self._shutdown_reason: str | None = None

    @property
    def log_level(self) -> int:
        return self._log_level

    @property
    def phase(self) -> DaemonPhase:
        return self._phase

    @property
    def running(self) -> bool:
        return self._phase is DaemonPhase.RUNNING

    @property
    def shutting_down(self) -> bool:
        return self._phase is DaemonPhase.SHUTTING_DOWN

    @property
    def shutdown_reason(self) -> str | None:
        return self._shutdown_reason

    def start(self) -> None:
        if self._phase is DaemonPhase.STARTING:
            self._phase = DaemonPhase.RUNNING

    def toggle_log_level(self) -> int:
        """Flip between DEBUG and INFO. Returns the new level."""
        self._log_level = logging.INFO if self._log_level == logging.DEBUG else logging.DEBUG
        if self._apply_level:
            set_level(self._log_level)
        logger.info("Log level set to %s", logging.getLevelName(self._log_level))
        return self._log_level

    def begin_shutdown(self, reason: str) -> bool:
        """Enter ShuttingDown. Returns False if already shutting down."""
        if self._phase is DaemonPhase.SHUTTING_DOWN:
            return False
        self._phase = DaemonPhase.SHUTTING_DOWN
        self._shutdown_reason = reason
        return True

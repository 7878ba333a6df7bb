"""
Logging configuration — central setup for the daemon and the CLI.

Called once at startup by main.py.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    -x flag  >  CFGD_LOG_LEVEL env var  >  INFO (default)

Optional file output via CFGD_LOG_FILE / CFGD_LOG_FILE_LEVEL env vars,
and optional remote syslog (``-l IP``, facility daemon, UDP 514).
"""

from __future__ import annotations

import logging
import logging.handlers
import sys

# ── Format strings ──────────────────────────────────────────────

# WARNING and above: message only
_FMT_MINIMAL = "%(message)s"

# INFO: time and logger name
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG: level and source line
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

# File: full detail with date
_FMT_FILE = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Syslog adds its own timestamp and host
_FMT_SYSLOG = "cfgd[%(process)d]: %(levelname)s %(name)s: %(message)s"

SYSLOG_PORT = 514

# Handlers whose level follows the runtime level (console, syslog)
_FOLLOWING_ATTR = "_cfgd_follows_level"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    log_file_level: str | None = None,
    syslog_host: str | None = None,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        syslog_host: Optional IPv4 address of a remote syslog collector.
    """
    numeric_level = parse_level(level)

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # ── Console handler (stderr) ────────────────────────────────
    console = logging.StreamHandler(sys.stderr)
    setattr(console, _FOLLOWING_ATTR, True)
    root.addHandler(console)

    # ── Remote syslog (optional) ────────────────────────────────
    if syslog_host:
        remote = logging.handlers.SysLogHandler(
            address=(syslog_host, SYSLOG_PORT),
            facility=logging.handlers.SysLogHandler.LOG_DAEMON,
        )
        remote.setFormatter(logging.Formatter(_FMT_SYSLOG))
        setattr(remote, _FOLLOWING_ATTR, True)
        root.addHandler(remote)

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else numeric_level
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    set_level(numeric_level)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False


def set_level(level: int | str) -> int:
    """Re-level the process at runtime (SIGUSR2 toggle).

    Console and syslog handlers follow the new level; a file handler
    keeps its own. Returns the numeric level applied.
    """
    numeric_level = level if isinstance(level, int) else parse_level(level)
    root = logging.getLogger()

    effective_level = numeric_level
    for handler in root.handlers:
        if getattr(handler, _FOLLOWING_ATTR, False):
            handler.setLevel(numeric_level)
            if isinstance(handler, logging.StreamHandler) and not isinstance(
                handler, logging.FileHandler
            ):
                handler.setFormatter(_console_formatter(numeric_level))
        else:
            effective_level = min(effective_level, handler.level or numeric_level)

    root.setLevel(effective_level)
    return numeric_level


def _console_formatter(numeric_level: int) -> logging.Formatter:
    if numeric_level <= logging.DEBUG:
        return logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT_DEBUG)
    if numeric_level <= logging.INFO:
        return logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT_VERBOSE)
    return logging.Formatter(_FMT_MINIMAL)


def parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return logging.INFO
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.INFO
    return numeric

"""
Change sources — where configuration snapshots come from.

A change source watches something and hands every new snapshot to a
``deliver`` callback. The daemon runs each source as a task on its event
loop and calls ``stop()`` on shutdown.

The default source polls a YAML snapshot file by mtime:

    first observation → load → deliver
    mtime changed     → load → deliver
    load error        → log, keep polling
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any

from cfgd.core.config.loader import ConfigError, load_snapshot
from cfgd.core.models.config import ConfigSnapshot

logger = logging.getLogger(__name__)

Deliver = Callable[[ConfigSnapshot], Any]

DEFAULT_POLL_INTERVAL_S = 2.0


class ChangeSource(ABC):
    """Base class for configuration transports."""

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    async def watch(self, deliver: Deliver) -> None:
        """Deliver snapshots until stopped."""

    @abstractmethod
    def stop(self) -> None:
        """Stop watching. Idempotent."""


class FileChangeSource(ChangeSource):
    """Polls a snapshot file and delivers it whenever it changes."""

    def __init__(self, path: Path, interval: float = DEFAULT_POLL_INTERVAL_S):
        self._path = Path(path)
        self._interval = interval
        self._stopped = asyncio.Event()
        self._last_mtime: int | None = None

    @property
    def name(self) -> str:
        return f"file:{self._path}"

    @property
    def path(self) -> Path:
        return self._path

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def stop(self) -> None:
        if not self._stopped.is_set():
            logger.debug("Stopping %s", self.name)
        self._stopped.set()

    def poll(self) -> ConfigSnapshot | None:
        """Check the file once. Returns a snapshot when it is new or changed."""
        try:
            mtime = self._path.stat().st_mtime_ns
        except FileNotFoundError:
            if self._last_mtime is not None:
                logger.warning("Snapshot file %s disappeared", self._path)
            self._last_mtime = None
            return None
        except OSError as e:
            logger.warning("Cannot stat %s: %s", self._path, e)
            return None

        if mtime == self._last_mtime:
            return None
        self._last_mtime = mtime

        try:
            return load_snapshot(self._path)
        except ConfigError as e:
            logger.error("Ignoring snapshot: %s", e)
            return None

    async def watch(self, deliver: Deliver) -> None:
        logger.info("Watching %s (poll every %.1fs)", self._path, self._interval)

        while not self._stopped.is_set():
            snapshot = self.poll()
            if snapshot is not None:
                logger.info("Snapshot change detected in %s", self._path)
                deliver(snapshot)

            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self._interval)
            except TimeoutError:
                pass

        logger.info("Stopped watching %s", self._path)

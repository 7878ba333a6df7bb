"""
Event loop glue — runs change sources and reacts to process signals.

The daemon is a single asyncio loop. Change sources run as tasks and
feed snapshots into the reconciler synchronously, so at most one
reconciliation is ever in flight. Signals are routed through the loop
(``loop.add_signal_handler``): a signal that arrives mid-reconciliation
is handled once that call has returned.

Signals:
    SIGUSR1           → placeholder, logged at debug
    SIGUSR2           → toggle INFO ↔ DEBUG
    SIGPIPE           → logged and ignored
    SIGHUP/INT/TERM   → stop sources, remove own handler, shut down
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from collections.abc import Sequence
from functools import partial

from cfgd import IDENT
from cfgd.core.context import DaemonContext
from cfgd.core.engine.reconciler import ConfigChange, Reconciler, ReconcileReport
from cfgd.core.services.change_source import ChangeSource

logger = logging.getLogger(__name__)

TERMINATION_SIGNALS = (signal.SIGHUP, signal.SIGINT, signal.SIGTERM)

# Programs the renderers shell out to
REQUIRED_PROGRAMS = ("systemctl", "timedatectl", "ip", "hostnamectl")


class Daemon:
    """Owns the loop-side lifecycle of one cfgd process."""

    def __init__(
        self,
        reconciler: Reconciler,
        context: DaemonContext,
        sources: Sequence[ChangeSource] = (),
    ):
        self._reconciler = reconciler
        self._context = context
        self._sources = list(sources)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._shutdown: asyncio.Event | None = None
        self._installed: set[int] = set()
        self._previous_pipe = None

    @property
    def context(self) -> DaemonContext:
        return self._context

    @property
    def sources(self) -> list[ChangeSource]:
        return list(self._sources)

    @property
    def installed_signals(self) -> set[int]:
        return set(self._installed)

    # ── Delivery ────────────────────────────────────────────────

    def deliver(self, change: ConfigChange) -> ReconcileReport | None:
        """Hand a change to the reconciler unless the daemon is shutting down."""
        if self._context.shutting_down:
            logger.warning("Shutting down, configuration change refused")
            return None
        return self._reconciler.deliver(change)

    # ── Signal handlers ─────────────────────────────────────────

    def install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop
        self._previous_pipe = signal.getsignal(signal.SIGPIPE)
        handlers = {
            signal.SIGUSR1: self._on_debug,
            signal.SIGUSR2: self._on_toggle_log_level,
            signal.SIGPIPE: self._on_pipe,
        }
        for sig in TERMINATION_SIGNALS:
            handlers[sig] = partial(self._on_terminate, sig)

        for sig, handler in handlers.items():
            loop.add_signal_handler(sig, handler)
            self._installed.add(sig)

    def remove_signal_handlers(self) -> None:
        if self._loop is None:
            return
        for sig in list(self._installed):
            self._loop.remove_signal_handler(sig)
        self._installed.clear()
        # remove_signal_handler leaves SIG_DFL behind; restore what was there
        if self._previous_pipe is not None:
            signal.signal(signal.SIGPIPE, self._previous_pipe)

    def _on_debug(self) -> None:
        logger.debug("SIGUSR1 received, nothing to do")

    def _on_toggle_log_level(self) -> None:
        if self._context.running:
            self._context.toggle_log_level()

    def _on_pipe(self) -> None:
        logger.warning("SIGPIPE received, ignoring")

    def _on_terminate(self, sig: int) -> None:
        name = signal.Signals(sig).name
        logger.info("Signal %s received. Shutting down gracefully...", name)

        # Default action again, so a second signal kills the process
        if self._loop is not None and sig in self._installed:
            self._loop.remove_signal_handler(sig)
            self._installed.discard(sig)

        self.request_shutdown(name)

    def request_shutdown(self, reason: str) -> None:
        """Stop all sources and let the loop drain."""
        if not self._context.begin_shutdown(reason):
            return
        for source in self._sources:
            source.stop()
        if self._shutdown is not None:
            self._shutdown.set()

    # ── Main loop ───────────────────────────────────────────────

    def check_tools(self) -> list[str]:
        """Warn about missing external programs. Returns the missing ones."""
        runner = self._reconciler.context.runner
        missing = [p for p in REQUIRED_PROGRAMS if not runner.is_available(p)]
        for program in missing:
            logger.warning("Program not found: %s (related changes will fail)", program)
        return missing

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        self._shutdown = asyncio.Event()
        self.install_signal_handlers(loop)
        tasks: set[asyncio.Task] = set()
        waiter = asyncio.create_task(self._shutdown.wait())

        try:
            self._context.start()
            logger.info("startup %s", IDENT)
            self.check_tools()

            tasks = {
                asyncio.create_task(source.watch(self.deliver), name=source.name)
                for source in self._sources
            }

            while not waiter.done():
                done, _ = await asyncio.wait(
                    tasks | {waiter}, return_when=asyncio.FIRST_COMPLETED
                )
                for task in done - {waiter}:
                    tasks.discard(task)
                    if not task.cancelled() and task.exception() is not None:
                        logger.error(
                            "Change source %s failed: %s", task.get_name(), task.exception()
                        )
                    else:
                        logger.info("Change source %s finished", task.get_name())

            # Sources were told to stop; let them finish their current iteration
            if tasks:
                await asyncio.gather(*tasks, return_exceptions=True)
                tasks.clear()

            logger.info("Shutdown complete (%s)", self._context.shutdown_reason)
        finally:
            self.remove_signal_handlers()
            for source in self._sources:
                source.stop()
            for task in [*tasks, waiter]:
                if not task.done():
                    task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await task

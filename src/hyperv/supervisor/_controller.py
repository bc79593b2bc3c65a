"""Restart controller driving the daemon loop.

This module provides the RestartController class that periodically reaps
exited task processes and relaunches failed auto-restart tasks, using anyio
for signal handling and the tick timer.
"""

from __future__ import annotations

import signal
from typing import TYPE_CHECKING, final

import anyio

from hyperv.exceptions import HyperVError
from hyperv.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from hyperv.tasks import TaskManager

DEFAULT_TICK_INTERVAL = 5.0


@final
class RestartController:
    """Runs cleanup and auto-restart on a fixed interval until shut down.

    Ticks run synchronously one after another, so they never overlap, and a
    shutdown request is observed only between ticks.
    """

    __slots__ = ("_logger", "_shutdown_event", "manager", "tick_count", "tick_interval")

    def __init__(
        self,
        manager: TaskManager,
        *,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            manager: Task manager whose tasks are monitored.
            tick_interval: Seconds between ticks.
            logger: Optional structured logger.
        """
        self.manager = manager
        self.tick_interval = tick_interval
        self.tick_count = 0
        self._logger: FilteringBoundLogger = logger or create_null_logger()
        self._shutdown_event: anyio.Event | None = None

    def tick(self) -> None:
        """Run one reap-then-restart pass.

        Errors from either step are logged and never propagate.
        """
        self.tick_count += 1
        try:
            failed = self.manager.cleanup()
        except (HyperVError, OSError) as e:
            self._logger.error("cleanup_failed", error=str(e))
        else:
            for task in failed:
                self._logger.warning(
                    "task_failed",
                    task_id=task.id,
                    name=task.name,
                    exit_code=task.last_exit_code,
                )

        try:
            restarted = self.manager.check_and_restart()
        except (HyperVError, OSError) as e:
            self._logger.error("restart_check_failed", error=str(e))
        else:
            for task in restarted:
                self._logger.info(
                    "task_restarted",
                    task_id=task.id,
                    name=task.name,
                    pid=task.pid,
                    attempt=task.restart_count,
                )

    async def run(self) -> None:
        """Tick until SIGINT, SIGTERM, or shutdown().

        The first tick happens one interval after startup.
        """
        self._shutdown_event = anyio.Event()
        shutdown_event = self._shutdown_event

        async def handle_signals() -> None:
            with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
                async for signum in signals:
                    self._logger.info("shutdown_signal", signal=signum.name)
                    shutdown_event.set()
                    break

        self._logger.info(
            "daemon_started",
            tasks=self.manager.task_count,
            auto_restart=self.manager.auto_restart_task_count,
            interval=self.tick_interval,
        )

        async with anyio.create_task_group() as tg:
            tg.start_soon(handle_signals)

            while not shutdown_event.is_set():
                with anyio.move_on_after(self.tick_interval):
                    await shutdown_event.wait()
                if shutdown_event.is_set():
                    break
                self.tick()

            tg.cancel_scope.cancel()

        self._shutdown_event = None
        self._logger.info("daemon_stopped", ticks=self.tick_count)

    def shutdown(self) -> None:
        """Request the run loop to exit after the current tick."""
        if self._shutdown_event is not None:
            self._shutdown_event.set()

# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Daemon command - monitors tasks and restarts failed ones."""

from __future__ import annotations

from typing import Annotated

import anyio
from cyclopts import Parameter

from hyperv.exceptions import HyperVError
from hyperv.supervisor import RestartController
from hyperv.utils import create_console_logger

from ._context import CLIContext
from ._tasks import fail


def daemon(
    *,
    interval: Annotated[
        float | None,
        Parameter(help="Seconds between monitoring passes"),
    ] = None,
) -> None:
    """Run in daemon mode (monitor and auto-restart tasks)

    Reaps exited task processes and relaunches failed tasks that have
    auto-restart enabled. Runs until SIGINT or SIGTERM.
    """
    ctx = CLIContext.get_current()
    try:
        manager = ctx.task_manager()
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="daemon")

    level = "debug" if ctx.verbose else ctx.config.logging.level.value
    controller = RestartController(
        manager,
        tick_interval=interval or ctx.config.supervisor.tick_interval,
        logger=create_console_logger(level=level),
    )

    ctx.console.print("Starting hyperv daemon...")
    ctx.console.print(
        f"Monitoring {manager.task_count} tasks "
        f"({manager.auto_restart_task_count} with auto-restart)"
    )
    ctx.console.print("[dim]Use 'hyperv list' to check task status[/dim]")
    ctx.console.print("[dim]Press Ctrl+C to stop the daemon[/dim]")

    anyio.run(controller.run)

    ctx.console.print("Daemon stopped")

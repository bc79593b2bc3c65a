# pyright: reportUnusedCallResult=false
# ruff: noqa: D415, FBT002
"""Log viewing command."""

from __future__ import annotations

from typing import Annotated

from cyclopts import Parameter

from hyperv.exceptions import HyperVError
from hyperv.logs import LogManager, parse_log_type

from ._context import CLIContext
from ._tasks import fail


def logs(
    task: str,
    /,
    *,
    lines: Annotated[
        int | None,
        Parameter(name=["--lines", "-l"], help="Number of lines to show"),
    ] = None,
    log_type: Annotated[
        str,
        Parameter(
            name=["--log-type", "-t"],
            help="Log stream to show (stdout, stderr, both)",
        ),
    ] = "stdout",
    follow: Annotated[
        bool,
        Parameter(
            name=["--follow", "-f"],
            negative=(),
            help="Follow logs in real-time (like tail -f)",
        ),
    ] = False,
) -> None:
    """Show task logs

    With ``--log-type both`` half of ``--lines`` comes from each stream.
    Following runs until Ctrl+C.

    Args:
        task: Task name, ID, or ID prefix.
    """
    ctx = CLIContext.get_current()
    try:
        stream = parse_log_type(log_type)
        manager = ctx.task_manager()
        stdout_path, stderr_path = manager.log_paths(manager.get_task(task))
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="logs")

    log_manager = LogManager(
        ctx.console, poll_interval=ctx.config.logs.follow_interval
    )
    line_count = lines if lines is not None else ctx.config.logs.default_lines
    try:
        log_manager.show_logs(
            stdout_path, stderr_path, stream, line_count, follow=follow
        )
    except KeyboardInterrupt:
        ctx.console.print("\n[dim]Stopped.[/dim]")
    except OSError as e:
        fail(ctx, e, command="logs")

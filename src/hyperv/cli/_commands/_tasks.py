# pyright: reportUnusedCallResult=false
# ruff: noqa: D415, FBT002
"""Task lifecycle commands: new, list, start, stop, remove, status."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Never

from cyclopts import Parameter
from rich.markup import escape

from hyperv.exceptions import HyperVError
from hyperv.logs import get_log_info
from hyperv.tasks import parse_env_assignments

from ._context import CLIContext
from ._formatters import format_task_detail, format_task_table
from ._shared import exit_code_for, exit_with_error

if TYPE_CHECKING:
    from hyperv.logs import LogInfo
    from hyperv.tasks import Task, TaskManager


def fail(ctx: CLIContext, error: HyperVError | OSError, *, command: str) -> Never:
    """Log a failed command and exit with the matching exit code."""
    if ctx.logger is not None:
        ctx.logger.warning(
            "command_failed",
            command=command,
            error=str(error),
            error_type=type(error).__name__,
        )
    exit_with_error(str(error), exit_code_for(error), console=ctx.error_console)


def _log_info(manager: TaskManager, task: Task) -> tuple[LogInfo, LogInfo]:
    stdout, stderr = manager.log_paths(task)
    return get_log_info(stdout), get_log_info(stderr)


def new(
    *args: Annotated[
        str,
        Parameter(
            allow_leading_hyphen=True,
            help="Arguments for the binary (after --)",
        ),
    ],
    name: Annotated[str, Parameter(name=["--name", "-n"], help="Name of the task")],
    binary: Annotated[
        str, Parameter(name=["--binary", "-b"], help="Path to the binary file")
    ],
    env: Annotated[
        list[str] | None,
        Parameter(
            name=["--env", "-e"],
            negative=(),
            help="Environment variable in KEY=VALUE form (repeatable)",
        ),
    ] = None,
    workdir: Annotated[
        str | None, Parameter(name=["--workdir", "-w"], help="Working directory")
    ] = None,
    auto_restart: Annotated[
        bool,
        Parameter(name="--auto-restart", negative=(), help="Auto-restart on failure"),
    ] = False,
) -> None:
    """Create a new task

    Registers a binary under a unique name. Arguments for the binary go
    after a literal ``--``.
    """
    ctx = CLIContext.get_current()
    try:
        env_vars = parse_env_assignments(env or [])
        manager = ctx.task_manager()
        task = manager.create_task(
            name,
            binary,
            list(args),
            env_vars,
            workdir,
            auto_restart=auto_restart,
        )
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="new")

    ctx.console.print(
        f"[green]Created task[/green] {escape(task.name)} ({task.short_id})"
    )
    if ctx.verbose:
        ctx.console.print(format_task_detail(task))


def list_tasks() -> None:
    """List all tasks"""
    ctx = CLIContext.get_current()
    try:
        tasks = ctx.task_manager().list_tasks()
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="list")

    if not tasks:
        ctx.console.print("No tasks configured.")
        return
    ctx.console.print(format_task_table(tasks))


def start(task: str, /) -> None:
    """Start a task

    Args:
        task: Task name, ID, or ID prefix.
    """
    ctx = CLIContext.get_current()
    try:
        started = ctx.task_manager().start_task(task)
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="start")

    ctx.console.print(
        f"[green]Started task[/green] {escape(started.name)} (PID: {started.pid})"
    )
    if ctx.verbose:
        ctx.console.print(f"  Binary: {escape(started.binary)}")
        if started.args:
            ctx.console.print(f"  Arguments: {escape(' '.join(started.args))}")
        if started.env:
            ctx.console.print(f"  Environment variables: {len(started.env)} vars")
        if started.workdir:
            ctx.console.print(f"  Working directory: {escape(started.workdir)}")


def stop(task: str, /) -> None:
    """Stop a task

    Sends SIGTERM, then SIGKILL if the process is still alive after the
    shutdown timeout.

    Args:
        task: Task name, ID, or ID prefix.
    """
    ctx = CLIContext.get_current()
    try:
        stopped, was_running = ctx.task_manager().stop_task(task)
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="stop")

    if was_running:
        ctx.console.print(f"[green]Stopped task[/green] {escape(stopped.name)}")
    else:
        ctx.console.print(f"Task {escape(stopped.name)} is already stopped")


def remove(task: str, /) -> None:
    """Remove a task

    Stops the task first if it is running. Log files are kept.

    Args:
        task: Task name, ID, or ID prefix.
    """
    ctx = CLIContext.get_current()
    try:
        removed = ctx.task_manager().remove_task(task)
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="remove")

    ctx.console.print(f"[green]Removed task[/green] {escape(removed.name)}")


def status(task: str | None = None, /) -> None:
    """Show task status

    Args:
        task: Task name, ID, or ID prefix (shows all tasks if omitted).
    """
    ctx = CLIContext.get_current()
    try:
        manager = ctx.task_manager()
        if task is not None:
            tasks = [manager.get_status(task)]
        else:
            tasks = manager.list_tasks()
        details = [
            format_task_detail(t, _log_info(manager, t) if ctx.verbose else None)
            for t in tasks
        ]
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="status")

    if not details:
        ctx.console.print("No tasks configured.")
        return
    for index, detail in enumerate(details):
        if index > 0:
            ctx.console.rule(style="dim")
        ctx.console.print(detail)

# pyright: reportUnusedCallResult=false
# ruff: noqa: D415
"""Binary diagnosis command."""

from __future__ import annotations

from rich.markup import escape

from hyperv.exceptions import HyperVError

from ._context import CLIContext
from ._formatters import format_diagnosis, format_task_detail
from ._tasks import fail


def diagnose(task: str, /) -> None:
    """Diagnose binary file issues

    Checks that the task's binary exists, is executable, and has a usable
    format or interpreter, then shows the task configuration.

    Args:
        task: Task name, ID, or ID prefix.
    """
    ctx = CLIContext.get_current()
    try:
        found, diagnosis = ctx.task_manager().diagnose(task)
    except (HyperVError, OSError) as e:
        fail(ctx, e, command="diagnose")

    ctx.console.print(f"Diagnosing task: [bold]{escape(found.name)}[/bold]")
    ctx.console.rule(style="dim")
    ctx.console.print(format_diagnosis(diagnosis))
    ctx.console.print("\nTask configuration:")
    ctx.console.print(format_task_detail(found))

    if diagnosis.error is not None:
        fail(ctx, diagnosis.error, command="diagnose")

"""Rich renderables for task listings, details, and diagnoses."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from hyperv.logs import LogInfo
    from hyperv.supervisor import BinaryDiagnosis
    from hyperv.tasks import Task

_BINARY_DISPLAY_LEN = 40

_STATUS_STYLES = {
    "running": "green",
    "stopped": "red",
    "failed": "yellow",
}


def _truncate(value: str, width: int) -> str:
    if len(value) <= width:
        return value
    return value[: width - 1] + "…"


def format_status(task: Task) -> str:
    style = _STATUS_STYLES.get(task.status.value, "white")
    return f"{task.status.icon} [{style}]{task.status.value}[/{style}]"


def format_task_table(tasks: list[Task]) -> Table:
    """Build the table shown by ``hyperv list``."""
    table = Table(box=box.SIMPLE_HEAD, show_edge=False)
    table.add_column("ID", no_wrap=True)
    table.add_column("NAME")
    table.add_column("STATUS", no_wrap=True)
    table.add_column("PID", justify="right")
    table.add_column("BINARY")

    for task in tasks:
        table.add_row(
            task.short_id,
            escape(task.name),
            format_status(task),
            str(task.pid) if task.pid is not None else "-",
            escape(_truncate(task.binary, _BINARY_DISPLAY_LEN)),
        )
    return table


def format_task_detail(
    task: Task,
    log_info: tuple[LogInfo, LogInfo] | None = None,
) -> Table:
    """Build the key/value view shown by ``hyperv status TASK``."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold", no_wrap=True)
    table.add_column()

    table.add_row("Task", escape(task.name))
    table.add_row("ID", task.id)
    table.add_row("Binary", escape(task.binary))
    table.add_row("Args", escape(" ".join(task.args)) if task.args else "-")
    table.add_row("Status", format_status(task))
    if task.pid is not None:
        table.add_row("PID", str(task.pid))
    if task.last_exit_code is not None:
        table.add_row("Last exit code", str(task.last_exit_code))
    table.add_row(
        "Auto-restart",
        f"{'yes' if task.auto_restart else 'no'} (restarts: {task.restart_count})",
    )
    if task.workdir:
        table.add_row("Working directory", escape(task.workdir))
    if task.env:
        table.add_row(
            "Environment",
            escape("\n".join(f"{key}={value}" for key, value in task.env.items())),
        )
    table.add_row("Created", task.created_at)
    if task.last_started:
        table.add_row("Last started", task.last_started)

    if log_info is not None:
        for label, path, info in (
            ("Stdout log", task.stdout_log_path, log_info[0]),
            ("Stderr log", task.stderr_log_path, log_info[1]),
        ):
            summary = (
                f"{info.format_size()}, {info.line_count} lines"
                if info.exists
                else "not created yet"
            )
            table.add_row(label, f"{escape(path or '-')} ({summary})")
    return table


def format_diagnosis(diagnosis: BinaryDiagnosis) -> Table:
    """Build the checklist shown by ``hyperv diagnose``."""
    table = Table.grid(padding=(0, 1))
    table.add_column(no_wrap=True)
    table.add_column()

    for finding in diagnosis.findings:
        marker = "[green]✓[/green]" if finding.ok else "[red]✗[/red]"
        table.add_row(marker, escape(finding.message))
        if finding.hint:
            table.add_row("", f"[dim]Hint: {escape(finding.hint)}[/dim]")
    return table

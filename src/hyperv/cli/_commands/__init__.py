"""hyperv CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from ._context import CLIContext
from ._daemon import daemon
from ._diagnose import diagnose
from ._logs import logs
from ._shared import (
    ExitCode,
    exit_code_for,
    exit_with_error,
    exit_with_success,
    get_error_console,
)
from ._tasks import list_tasks, new, remove, start, status, stop

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "daemon",
    "diagnose",
    "exit_code_for",
    "exit_with_error",
    "exit_with_success",
    "get_error_console",
    "list_tasks",
    "logs",
    "new",
    "remove",
    "start",
    "status",
    "stop",
]


def register_commands(app: App) -> None:
    app.command(new, name="new")
    app.command(list_tasks, name="list")
    app.command(start, name="start")
    app.command(stop, name="stop")
    app.command(remove, name="remove")
    app.command(status, name="status")
    app.command(logs, name="logs")
    app.command(diagnose, name="diagnose")
    app.command(daemon, name="daemon")

"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes
- Mapping of hyperv errors to exit codes
- Console utilities for error handling
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Never

from rich.markup import escape

from hyperv.exceptions import (
    BinaryError,
    BinaryNotFoundError,
    ConfigError,
    HyperVError,
    InterpreterNotFoundError,
    InvalidEnvVarError,
    InvalidLogTypeError,
    LogIOError,
    RegistryError,
    TaskAlreadyRunningError,
    TaskExistsError,
    TaskNotFoundError,
    WorkdirNotFoundError,
)

if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "ExitCode",
    "exit_code_for",
    "exit_with_error",
    "exit_with_success",
    "get_error_console",
]


class ExitCode(IntEnum):
    """Standard exit codes for hyperv CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    VALIDATION_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    CONFLICT = 6


_EXIT_CODES: tuple[tuple[type[Exception], ExitCode], ...] = (
    (TaskNotFoundError, ExitCode.NOT_FOUND),
    (BinaryNotFoundError, ExitCode.NOT_FOUND),
    (InterpreterNotFoundError, ExitCode.NOT_FOUND),
    (WorkdirNotFoundError, ExitCode.NOT_FOUND),
    (TaskExistsError, ExitCode.CONFLICT),
    (TaskAlreadyRunningError, ExitCode.CONFLICT),
    (InvalidEnvVarError, ExitCode.VALIDATION_ERROR),
    (InvalidLogTypeError, ExitCode.VALIDATION_ERROR),
    (BinaryError, ExitCode.VALIDATION_ERROR),
    (RegistryError, ExitCode.IO_ERROR),
    (LogIOError, ExitCode.IO_ERROR),
    (ConfigError, ExitCode.LOAD_ERROR),
    (OSError, ExitCode.IO_ERROR),
)


def exit_code_for(error: HyperVError | OSError) -> ExitCode:
    """Map an error to the exit code reported by the CLI."""
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.INTERNAL_ERROR


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    from rich.console import Console  # noqa: PLC0415

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise SystemExit(code)


def exit_with_success(
    message: str | None = None,
    *,
    console: Console | None = None,
) -> Never:
    """Print an optional success message and exit with SUCCESS code.

    Raises:
        SystemExit: Always raised with ExitCode.SUCCESS (0).
    """
    if message is not None:
        if console is None:
            console = get_error_console()
        console.print(message)
    raise SystemExit(ExitCode.SUCCESS)

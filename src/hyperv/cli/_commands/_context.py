# pyright: reportUnusedCallResult=false
"""CLI context for global state management.

This module provides context management for CLI options and loaded
configuration. The CLIContext is set once at CLI startup and made available
to all commands via contextvars.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from hyperv.config import Config
from hyperv.utils import create_null_logger, get_hyperv_home

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from hyperv.tasks import TaskManager


_current_cli_context: contextvars.ContextVar[CLIContext | None] = (
    contextvars.ContextVar("cli_context", default=None)
)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context with configuration and options.

    Attributes:
        config: Loaded configuration object.
        verbose: Enable verbose output with additional details.
        config_error: Error message if config loading failed.
        logger: Structured logger for CLI commands (writes to file only).
        console: Console for regular output.
        error_console: Console for error output.
    """

    config: Config = field(repr=False)
    verbose: bool = False
    config_error: str | None = None
    logger: FilteringBoundLogger | None = field(default=None, repr=False)
    console: Console = field(default_factory=Console, repr=False)
    error_console: Console = field(
        default_factory=lambda: Console(stderr=True), repr=False
    )

    @property
    def home(self) -> Path:
        """Return the directory holding the registry, logs, and config."""
        return self.config.paths.resolve_home(get_hyperv_home())

    def task_manager(self) -> TaskManager:
        """Build a TaskManager with the registry loaded from the home directory."""
        from hyperv.tasks import TaskManager  # noqa: PLC0415

        return TaskManager.from_config(
            self.config, self.home, logger=self.logger or create_null_logger()
        )

    @classmethod
    def get_current(cls) -> CLIContext:
        """Get current active CLIContext, or create a default if not set.

        Returns:
            The currently active CLIContext, or a default instance if none is set.
        """
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx

        default_config = Config.from_dict({})
        return cls(config=default_config)

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        """Set the current active CLIContext.

        Args:
            ctx: The CLIContext to set as current.
        """
        _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to default context.

        This is primarily useful for testing to ensure a clean state between tests.
        """
        _current_cli_context.set(None)

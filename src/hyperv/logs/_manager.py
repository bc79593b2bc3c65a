"""Console presentation of task logs."""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from rich.console import Console
from rich.markup import escape

from ._follow import DEFAULT_POLL_INTERVAL, follow_both_logs, follow_log
from ._models import LogType
from ._reader import read_log_lines

if TYPE_CHECKING:
    from pathlib import Path


@final
class LogManager:
    """Prints log tails and follows logs on a rich console."""

    __slots__ = ("console", "poll_interval")

    def __init__(
        self,
        console: Console | None = None,
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.console = console or Console()
        self.poll_interval = poll_interval

    def _emit(self, line: str) -> None:
        self.console.print(escape(line), highlight=False, soft_wrap=True)

    def show_logs(
        self,
        stdout_path: Path,
        stderr_path: Path,
        log_type: LogType,
        lines: int,
        *,
        follow: bool = False,
    ) -> None:
        """Print the tail of a task's logs, then optionally follow them.

        ``LogType.BOTH`` shows ``lines // 2`` lines from each stream.
        Following blocks until interrupted.
        """
        if log_type is LogType.BOTH:
            self._show_tail(stdout_path, "STDOUT", lines // 2)
            self.console.print()
            self._show_tail(stderr_path, "STDERR", lines // 2)
            if follow:
                self.console.print("\n=== Following logs (Ctrl+C to stop) ===")
                follow_both_logs(
                    stdout_path, stderr_path, self._emit, self.poll_interval
                )
            return

        path, title = (
            (stdout_path, "STDOUT")
            if log_type is LogType.STDOUT
            else (stderr_path, "STDERR")
        )
        self._show_tail(path, title, lines)
        if follow:
            self.console.print(f"\n=== Following {title} (Ctrl+C to stop) ===")
            follow_log(path, self._emit, self.poll_interval)

    def _show_tail(self, path: Path, title: str, lines: int) -> None:
        self.console.print(f"=== {title} ===")
        for line in read_log_lines(path, lines):
            self._emit(line)

"""Follow mode for real-time log tailing.

Both functions poll forever and only end when the caller is interrupted
(Ctrl+C raises KeyboardInterrupt, which propagates).
"""

from __future__ import annotations

import os
import time
from typing import TYPE_CHECKING, final

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

DEFAULT_POLL_INTERVAL = 0.1

STDOUT_LABEL = "[OUT] "
STDERR_LABEL = "[ERR] "


@final
class _Tail:
    """Reads lines appended to a file after it was opened.

    Partial lines are held back until their newline arrives. When the path
    is replaced by a new file (rotation), the new file is read from its
    start. When the same file shrinks (truncation), reading restarts from
    the beginning.
    """

    __slots__ = ("_file", "_pending", "path")

    def __init__(self, path: Path) -> None:
        self.path = path
        self._file = path.open("rb")
        self._pending = b""
        _ = self._file.seek(0, os.SEEK_END)

    def close(self) -> None:
        self._file.close()

    def _check_replaced(self) -> None:
        try:
            current = self.path.stat()
        except OSError:
            return
        opened = os.fstat(self._file.fileno())

        if (current.st_dev, current.st_ino) != (opened.st_dev, opened.st_ino):
            try:
                replacement = self.path.open("rb")
            except OSError:
                return
            self._file.close()
            self._file = replacement
            self._pending = b""
        elif current.st_size < self._file.tell():
            _ = self._file.seek(0)
            self._pending = b""

    def read_line(self) -> str | None:
        """Return the next complete line without its newline, or None."""
        chunk = self._file.readline()
        if not chunk:
            self._check_replaced()
            return None
        data = self._pending + chunk
        if not data.endswith(b"\n"):
            self._pending = data
            return None
        self._pending = b""
        return data.rstrip(b"\r\n").decode("utf-8", errors="replace")


def follow_log(
    log_path: Path,
    emit: Callable[[str], None],
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> None:
    """Emit each line appended to a log file, forever.

    Starts at the current end of the file. A missing file emits a notice
    and returns immediately.

    Args:
        log_path: File to follow.
        emit: Called with each new line.
        poll_interval: Seconds to sleep when no new data is available.
    """
    if not log_path.exists():
        emit(f"Log file not found: {log_path}")
        return

    tail = _Tail(log_path)
    try:
        while True:
            line = tail.read_line()
            if line is None:
                time.sleep(poll_interval)
                continue
            emit(line)
    finally:
        tail.close()


def follow_both_logs(
    stdout_path: Path,
    stderr_path: Path,
    emit: Callable[[str], None],
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> None:
    """Interleave lines appended to stdout and stderr logs, forever.

    Each pass reads at most one line per stream, labelled ``[OUT]`` or
    ``[ERR]``, and sleeps only when neither produced output. A stream whose
    file does not exist yet is skipped.

    Args:
        stdout_path: The stdout log.
        stderr_path: The stderr log.
        emit: Called with each labelled line.
        poll_interval: Seconds to sleep after a pass with no output.
    """
    tails: list[tuple[str, _Tail]] = []
    try:
        for label, path in ((STDOUT_LABEL, stdout_path), (STDERR_LABEL, stderr_path)):
            if path.exists():
                tails.append((label, _Tail(path)))

        while True:
            has_output = False
            for label, tail in tails:
                line = tail.read_line()
                if line is not None:
                    emit(f"{label}{line}")
                    has_output = True
            if not has_output:
                time.sleep(poll_interval)
    finally:
        for _, tail in tails:
            tail.close()

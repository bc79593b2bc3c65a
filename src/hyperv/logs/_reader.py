"""Reading log tails and log file statistics."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from ._models import LogInfo

if TYPE_CHECKING:
    from pathlib import Path

LOG_NOT_FOUND = "Log file not found or empty"


def read_log_lines(log_path: Path, lines: int) -> list[str]:
    """Return the last ``lines`` lines of a log file.

    Trailing newlines are stripped. A missing file returns a single
    placeholder line.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    if not log_path.exists():
        return [LOG_NOT_FOUND]
    if lines <= 0:
        return []

    with log_path.open(encoding="utf-8", errors="replace") as f:
        tail = deque(f, maxlen=lines)
    return [line.rstrip("\r\n") for line in tail]


def get_log_info(log_path: Path) -> LogInfo:
    """Return existence, size, and line count of a log file.

    Raises:
        OSError: If the file exists but cannot be read.
    """
    if not log_path.exists():
        return LogInfo(exists=False)

    size = log_path.stat().st_size
    with log_path.open("rb") as f:
        line_count = sum(1 for _ in f)
    return LogInfo(exists=True, size=size, line_count=line_count)

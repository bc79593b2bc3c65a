"""Data models for task log access."""

from dataclasses import dataclass
from enum import StrEnum

from hyperv.exceptions import InvalidLogTypeError

_KILOBYTE = 1024
_MEGABYTE = 1024 * 1024


class LogType(StrEnum):
    """Which of a task's output streams to show."""

    STDOUT = "stdout"
    STDERR = "stderr"
    BOTH = "both"


def parse_log_type(value: str) -> LogType:
    """Parse a stream selector, ignoring case.

    Raises:
        InvalidLogTypeError: If the value is not stdout, stderr, or both.
    """
    try:
        return LogType(value.lower())
    except ValueError:
        msg = f"Invalid log type: {value} (expected stdout, stderr, or both)"
        raise InvalidLogTypeError(msg, log_type=value) from None


@dataclass(slots=True, frozen=True)
class LogInfo:
    """Size and length of a log file.

    Attributes:
        exists: Whether the file exists.
        size: Size in bytes.
        line_count: Number of lines.
    """

    exists: bool
    size: int = 0
    line_count: int = 0

    def format_size(self) -> str:
        """Format the size as B, KB, or MB."""
        if self.size < _KILOBYTE:
            return f"{self.size} B"
        if self.size < _MEGABYTE:
            return f"{self.size / _KILOBYTE:.1f} KB"
        return f"{self.size / _MEGABYTE:.1f} MB"

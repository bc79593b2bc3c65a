"""Task log management: rotation, tails, and follow mode."""

from ._follow import (
    DEFAULT_POLL_INTERVAL,
    STDERR_LABEL,
    STDOUT_LABEL,
    follow_both_logs,
    follow_log,
)
from ._manager import LogManager
from ._models import LogInfo, LogType, parse_log_type
from ._reader import LOG_NOT_FOUND, get_log_info, read_log_lines
from ._rotation import DEFAULT_MAX_LOG_SIZE, backup_path_for, rotate_log_if_needed

__all__ = [
    "DEFAULT_MAX_LOG_SIZE",
    "DEFAULT_POLL_INTERVAL",
    "LOG_NOT_FOUND",
    "STDERR_LABEL",
    "STDOUT_LABEL",
    "LogInfo",
    "LogManager",
    "LogType",
    "backup_path_for",
    "follow_both_logs",
    "follow_log",
    "get_log_info",
    "parse_log_type",
    "read_log_lines",
    "rotate_log_if_needed",
]

"""Size-based log rotation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hyperv.exceptions import LogIOError

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_MAX_LOG_SIZE = 10 * 1024 * 1024


def backup_path_for(log_path: Path) -> Path:
    """Return the single backup generation path, e.g. ``stdout.log.old``."""
    return log_path.with_name(f"{log_path.name}.old")


def rotate_log_if_needed(log_path: Path, max_size: int = DEFAULT_MAX_LOG_SIZE) -> bool:
    """Move a log aside if it has grown past ``max_size`` bytes.

    Any existing backup is replaced, so at most one generation of history
    is kept.

    Returns:
        True if the file was rotated.

    Raises:
        LogIOError: If the file cannot be inspected or moved.
    """
    try:
        if not log_path.exists() or log_path.stat().st_size <= max_size:
            return False
        _ = log_path.replace(backup_path_for(log_path))
    except OSError as e:
        msg = f"Failed to rotate log file {log_path}: {e}"
        raise LogIOError(msg, path=log_path, cause=e) from e
    return True

from os import getenv
from pathlib import Path

import platformdirs

_APP_NAME = "hyperv"


def get_hyperv_home() -> Path:
    """Get the hyperv home directory.

    Uses ``HYPERV_HOME`` when set, otherwise the platform user config
    directory (``~/.config/hyperv`` on Linux).
    """
    override = getenv("HYPERV_HOME")
    if override:
        return Path(override).expanduser()
    return platformdirs.user_config_path(_APP_NAME)


def get_config_file(home: Path | None = None) -> Path:
    """Get the path to config.toml inside the home directory."""
    return (home or get_hyperv_home()) / "config.toml"


def get_tasks_file(home: Path | None = None) -> Path:
    """Get the path to the task registry file."""
    return (home or get_hyperv_home()) / "tasks.json"


def get_logs_dir(home: Path | None = None) -> Path:
    """Get the path to the logs/ directory holding per-task logs."""
    return (home or get_hyperv_home()) / "logs"


def get_task_log_dir(logs_dir: Path, task_id: str) -> Path:
    """Get the per-task log directory."""
    return logs_dir / task_id


def get_stdout_log_path(logs_dir: Path, task_id: str) -> Path:
    """Get the stdout log file for a task."""
    return get_task_log_dir(logs_dir, task_id) / "stdout.log"


def get_stderr_log_path(logs_dir: Path, task_id: str) -> Path:
    """Get the stderr log file for a task."""
    return get_task_log_dir(logs_dir, task_id) / "stderr.log"


def get_cli_log_file(home: Path | None = None) -> Path:
    """Get the path to hyperv's own structured log file."""
    return (home or get_hyperv_home()) / "hyperv.log"

"""Shared utilities for hyperv."""

from ._json import dump_json, load_json
from ._logging import create_cli_logger, create_console_logger, create_null_logger
from ._paths import (
    get_cli_log_file,
    get_config_file,
    get_hyperv_home,
    get_logs_dir,
    get_stderr_log_path,
    get_stdout_log_path,
    get_task_log_dir,
    get_tasks_file,
)

__all__ = [
    "create_cli_logger",
    "create_console_logger",
    "create_null_logger",
    "dump_json",
    "get_cli_log_file",
    "get_config_file",
    "get_hyperv_home",
    "get_logs_dir",
    "get_stderr_log_path",
    "get_stdout_log_path",
    "get_task_log_dir",
    "get_tasks_file",
    "load_json",
]

"""Task registry and lifecycle management.

This package provides the Task model, the persistent TaskRegistry, helpers
for task environments, and the TaskManager facade used by the CLI and the
daemon.
"""

from ._env import load_env_file, parse_env_assignments, resolve_task_env
from ._manager import TaskManager
from ._models import Task, TaskStatus, now_iso
from ._registry import TaskRegistry

__all__ = [
    "Task",
    "TaskManager",
    "TaskRegistry",
    "TaskStatus",
    "load_env_file",
    "now_iso",
    "parse_env_assignments",
    "resolve_task_env",
]

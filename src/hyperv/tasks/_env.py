"""Environment handling for task launches."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import dotenv_values

from hyperv.exceptions import InvalidEnvVarError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._models import Task

ENV_FILE_NAME = ".env"


def parse_env_assignments(assignments: Iterable[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` strings into a mapping.

    The value is everything after the first ``=`` and may be empty. Later
    assignments of the same key win.

    Raises:
        InvalidEnvVarError: If an entry has no ``=`` or an empty key.
    """
    env: dict[str, str] = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep or not key:
            msg = f"Invalid environment variable format: {assignment}"
            raise InvalidEnvVarError(msg, assignment=assignment)
        env[key] = value
    return env


def load_env_file(workdir: str | Path | None) -> dict[str, str]:
    """Read ``<workdir>/.env`` if it exists.

    Keys declared without a value are skipped. A missing workdir or file
    yields an empty mapping.
    """
    if workdir is None:
        return {}
    env_file = Path(workdir) / ENV_FILE_NAME
    if not env_file.is_file():
        return {}
    return {
        key: value
        for key, value in dotenv_values(env_file).items()
        if value is not None
    }


def resolve_task_env(task: Task) -> dict[str, str]:
    """Build the environment overlay for launching ``task``.

    Values from the workdir ``.env`` file come first; the task's explicit
    ``env`` overrides them.
    """
    return {**load_env_file(task.workdir), **task.env}

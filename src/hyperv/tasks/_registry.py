"""Persistent registry of supervised tasks.

The registry owns every Task record and stores the whole collection as a
single JSON document. Loading is forgiving: a missing or unreadable file
yields an empty registry so the tool always starts.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, final

import orjson
from pydantic import TypeAdapter, ValidationError

from hyperv.exceptions import (
    RegistryIOError,
    SerializationError,
    TaskExistsError,
    TaskNotFoundError,
)
from hyperv.utils import (
    create_null_logger,
    dump_json,
    get_stderr_log_path,
    get_stdout_log_path,
    get_task_log_dir,
    load_json,
)

from ._models import Task

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

_TASK_LIST_ADAPTER: TypeAdapter[list[Task]] = TypeAdapter(list[Task])


@final
class TaskRegistry:
    """Ordered collection of Task records backed by a JSON file.

    Insertion order is preserved across save and load, which makes prefix
    lookups deterministic: the earliest-created match wins.
    """

    __slots__ = ("_logger", "_tasks", "logs_dir", "path")

    def __init__(
        self,
        path: Path,
        logs_dir: Path,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            path: JSON file the registry is persisted to.
            logs_dir: Root directory for per-task log directories.
            logger: Optional structured logger.
        """
        self.path = path
        self.logs_dir = logs_dir
        self._logger: FilteringBoundLogger = logger or create_null_logger()
        self._tasks: list[Task] = []

    @classmethod
    def open(
        cls,
        path: Path,
        logs_dir: Path,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> TaskRegistry:
        """Create a registry and load its current contents from disk."""
        registry = cls(path, logs_dir, logger=logger)
        registry.load()
        return registry

    @property
    def tasks(self) -> list[Task]:
        """Return the tasks in insertion order."""
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def create(
        self,
        name: str,
        binary: str,
        args: list[str] | None = None,
        env: dict[str, str] | None = None,
        workdir: str | None = None,
        *,
        auto_restart: bool = False,
    ) -> Task:
        """Register a new task and persist the registry.

        Args:
            name: Unique task name.
            binary: Path to the executable or script.
            args: Command-line arguments.
            env: Explicit environment variables.
            workdir: Working directory for the process.
            auto_restart: Whether the daemon restarts the task on failure.

        Returns:
            The newly created task.

        Raises:
            TaskExistsError: If a task with the same name already exists.
            RegistryIOError: If the registry cannot be written.
        """
        if any(task.name == name for task in self._tasks):
            msg = f"Task with name '{name}' already exists"
            raise TaskExistsError(msg, name=name)

        task_id = self._new_id()
        task = Task(
            id=task_id,
            name=name,
            binary=binary,
            args=list(args or []),
            env=dict(env or {}),
            workdir=workdir,
            auto_restart=auto_restart,
            stdout_log_path=str(get_stdout_log_path(self.logs_dir, task_id)),
            stderr_log_path=str(get_stderr_log_path(self.logs_dir, task_id)),
        )
        task_log_dir = get_task_log_dir(self.logs_dir, task_id)
        try:
            task_log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create log directory {task_log_dir}: {e}"
            raise RegistryIOError(msg, path=task_log_dir, cause=e) from e

        self._tasks.append(task)
        self.persist()
        self._logger.info("task_created", task_id=task_id, name=name, binary=binary)
        return task

    def _new_id(self) -> str:
        existing = {task.id for task in self._tasks}
        while True:
            task_id = str(uuid.uuid4())
            if task_id not in existing:
                return task_id

    def find(self, identifier: str) -> Task | None:
        """Find the first task matching a name, id, or id prefix.

        Returns:
            The matching task, or None if nothing matches.
        """
        for task in self._tasks:
            if task.matches(identifier):
                return task
        return None

    def get(self, identifier: str) -> Task:
        """Find a task or raise.

        Raises:
            TaskNotFoundError: If no task matches the identifier.
        """
        task = self.find(identifier)
        if task is None:
            msg = f"Task '{identifier}' not found"
            raise TaskNotFoundError(msg, identifier=identifier)
        return task

    def remove(self, task_id: str) -> Task:
        """Delete the task with the exact id and persist.

        Log files on disk are left in place.

        Raises:
            TaskNotFoundError: If no task has this id.
        """
        for index, task in enumerate(self._tasks):
            if task.id == task_id:
                del self._tasks[index]
                self.persist()
                self._logger.info("task_removed", task_id=task_id, name=task.name)
                return task
        msg = f"Task '{task_id}' not found"
        raise TaskNotFoundError(msg, identifier=task_id)

    def persist(self) -> None:
        """Write the whole collection to the registry file.

        Raises:
            SerializationError: If a record cannot be serialized.
            RegistryIOError: If the file cannot be written.
        """
        try:
            payload = dump_json(self._tasks)
        except orjson.JSONEncodeError as e:
            msg = f"Failed to serialize tasks: {e}"
            raise SerializationError(msg, cause=e) from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            _ = self.path.write_bytes(payload)
        except OSError as e:
            msg = f"Failed to write task registry {self.path}: {e}"
            raise RegistryIOError(msg, path=self.path, cause=e) from e

    def load(self) -> None:
        """Replace in-memory records with the registry file's contents.

        A missing file, unreadable file, or malformed document loads as an
        empty registry and logs a warning.
        """
        self._tasks = []
        if not self.path.exists():
            return

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            self._logger.warning(
                "registry_unreadable", path=str(self.path), error=str(e)
            )
            return

        data = load_json(raw)
        if not isinstance(data, list):
            self._logger.warning("registry_malformed", path=str(self.path))
            return

        try:
            self._tasks = _TASK_LIST_ADAPTER.validate_python(data)
        except ValidationError as e:
            self._logger.warning(
                "registry_malformed",
                path=str(self.path),
                error_count=e.error_count(),
            )

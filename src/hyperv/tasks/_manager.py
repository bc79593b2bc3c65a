"""Task lifecycle operations.

This module provides the TaskManager class, which ties the registry, the
process supervisor, and log rotation together into the operations exposed by
the CLI and the daemon.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import TYPE_CHECKING, final

from hyperv.exceptions import (
    BinaryError,
    HyperVError,
    ProcessStartError,
    TaskAlreadyRunningError,
    WorkdirNotFoundError,
)
from hyperv.logs import DEFAULT_MAX_LOG_SIZE, rotate_log_if_needed
from hyperv.supervisor import ProcessSupervisor, diagnose_binary
from hyperv.utils import (
    create_null_logger,
    get_logs_dir,
    get_stderr_log_path,
    get_stdout_log_path,
    get_tasks_file,
)

from ._env import resolve_task_env
from ._models import Task, TaskStatus
from ._registry import TaskRegistry

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from hyperv.config import Config
    from hyperv.supervisor import BinaryDiagnosis


@final
class TaskManager:
    """Facade over the registry and the process supervisor.

    Every state change is persisted before the operation returns.

    Attributes:
        registry: Owner of the task records.
        supervisor: Owner of the live process handles.
    """

    __slots__ = (
        "_logger",
        "max_log_size",
        "max_restart_attempts",
        "registry",
        "restart_delay",
        "supervisor",
    )

    def __init__(  # noqa: PLR0913
        self,
        registry: TaskRegistry,
        supervisor: ProcessSupervisor,
        *,
        max_log_size: int = DEFAULT_MAX_LOG_SIZE,
        max_restart_attempts: int = 5,
        restart_delay: float = 1.0,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            registry: Loaded task registry.
            supervisor: Process supervisor for spawning and stopping.
            max_log_size: Size in bytes past which logs rotate at start.
            max_restart_attempts: Auto-restart cap.
            restart_delay: Seconds to sleep before each auto-restart.
            logger: Optional structured logger.
        """
        self.registry = registry
        self.supervisor = supervisor
        self.max_log_size = max_log_size
        self.max_restart_attempts = max_restart_attempts
        self.restart_delay = restart_delay
        self._logger: FilteringBoundLogger = logger or create_null_logger()

    @classmethod
    def from_config(
        cls,
        config: Config,
        home: Path,
        *,
        logger: FilteringBoundLogger | None = None,
    ) -> TaskManager:
        """Build a manager whose registry lives under ``home``."""
        registry = TaskRegistry.open(
            get_tasks_file(home), get_logs_dir(home), logger=logger
        )
        supervisor = ProcessSupervisor(
            shutdown_timeout=config.supervisor.shutdown_timeout,
            kill_settle=config.supervisor.kill_settle,
            logger=logger,
        )
        return cls(
            registry,
            supervisor,
            max_log_size=config.logs.max_size,
            max_restart_attempts=config.supervisor.max_restart_attempts,
            restart_delay=config.supervisor.restart_delay,
            logger=logger,
        )

    # -- queries ---------------------------------------------------------

    @property
    def task_count(self) -> int:
        return len(self.registry)

    @property
    def running_task_count(self) -> int:
        return sum(1 for task in self.registry if task.status is TaskStatus.RUNNING)

    @property
    def auto_restart_task_count(self) -> int:
        return sum(1 for task in self.registry if task.auto_restart)

    def find_task(self, identifier: str) -> Task | None:
        return self.registry.find(identifier)

    def get_task(self, identifier: str) -> Task:
        """Resolve a name, id, or id prefix.

        Raises:
            TaskNotFoundError: If nothing matches.
        """
        return self.registry.get(identifier)

    def list_tasks(self) -> list[Task]:
        """Reconcile statuses with liveness probes and return all tasks."""
        _ = self.refresh_statuses()
        return self.registry.tasks

    def get_status(self, identifier: str) -> Task:
        """Reconcile statuses and return one task.

        Raises:
            TaskNotFoundError: If nothing matches.
        """
        _ = self.refresh_statuses()
        return self.registry.get(identifier)

    def log_paths(self, task: Task) -> tuple[Path, Path]:
        """Return the stdout and stderr log paths for a task."""
        stdout = (
            Path(task.stdout_log_path)
            if task.stdout_log_path
            else get_stdout_log_path(self.registry.logs_dir, task.id)
        )
        stderr = (
            Path(task.stderr_log_path)
            if task.stderr_log_path
            else get_stderr_log_path(self.registry.logs_dir, task.id)
        )
        return stdout, stderr

    def diagnose(self, identifier: str) -> tuple[Task, BinaryDiagnosis]:
        """Diagnose a task's binary.

        Raises:
            TaskNotFoundError: If nothing matches.
        """
        task = self.registry.get(identifier)
        return task, diagnose_binary(task.binary)

    # -- lifecycle -------------------------------------------------------

    def create_task(  # noqa: PLR0913
        self,
        name: str,
        binary: str,
        args: list[str] | None = None,
        env: dict[str, str] | None = None,
        workdir: str | None = None,
        *,
        auto_restart: bool = False,
    ) -> Task:
        """Register a new task.

        Raises:
            TaskExistsError: If the name is taken.
        """
        return self.registry.create(
            name, binary, args, env, workdir, auto_restart=auto_restart
        )

    def start_task(self, identifier: str) -> Task:
        """Start a task's process.

        Raises:
            TaskNotFoundError: If nothing matches.
            TaskAlreadyRunningError: If the task's process is alive.
            WorkdirNotFoundError: If the working directory is missing.
            LogIOError: If a log file cannot be rotated.
            BinaryError: If the binary fails validation.
            ProcessStartError: If spawning fails.
        """
        return self._start(self.registry.get(identifier))

    def _start(self, task: Task) -> Task:
        if task.status is TaskStatus.RUNNING:
            if task.pid is not None and self.supervisor.is_running(task.pid):
                msg = f"Task '{task.name}' is already running (PID: {task.pid})"
                raise TaskAlreadyRunningError(msg, name=task.name, pid=task.pid)
            self._logger.info("stale_running_task", task_id=task.id, pid=task.pid)
            task.mark_failed()
            self.registry.persist()

        if task.workdir is not None and not Path(task.workdir).is_dir():
            msg = f"Working directory not found: {task.workdir}"
            raise WorkdirNotFoundError(msg, workdir=task.workdir)

        stdout_log, stderr_log = self.log_paths(task)
        for log_path in (stdout_log, stderr_log):
            if rotate_log_if_needed(log_path, self.max_log_size):
                self._logger.info("log_rotated", task_id=task.id, path=str(log_path))

        env = resolve_task_env(task)
        try:
            pid = self.supervisor.start(task, env, stdout_log, stderr_log)
        except (BinaryError, ProcessStartError) as e:
            task.mark_failed()
            self.registry.persist()
            self._logger.warning(
                "task_start_failed", task_id=task.id, name=task.name, error=str(e)
            )
            raise

        task.mark_running(pid)
        self.registry.persist()
        self._logger.info("task_started", task_id=task.id, name=task.name, pid=pid)
        return task

    def stop_task(self, identifier: str) -> tuple[Task, bool]:
        """Stop a task's process.

        Stopping a task that is not running succeeds without effect.

        Returns:
            The task and whether a running process was stopped.

        Raises:
            TaskNotFoundError: If nothing matches.
            ProcessStopError: If the process cannot be signalled.
        """
        task = self.registry.get(identifier)
        if task.status is not TaskStatus.RUNNING:
            return task, False

        if task.pid is None or not self.supervisor.is_running(task.pid):
            if task.pid is not None:
                self.supervisor.stop(task.id, task.pid)
            task.mark_stopped()
            self.registry.persist()
            self._logger.info("task_already_exited", task_id=task.id, name=task.name)
            return task, True

        self.supervisor.stop(task.id, task.pid)
        task.mark_stopped()
        self.registry.persist()
        self._logger.info("task_stopped", task_id=task.id, name=task.name)
        return task, True

    def remove_task(self, identifier: str) -> Task:
        """Stop a task if it is running, then delete it.

        Raises:
            TaskNotFoundError: If nothing matches.
            ProcessStopError: If the process cannot be signalled.
        """
        task = self.registry.get(identifier)
        if task.status is TaskStatus.RUNNING:
            _ = self.stop_task(task.id)
        return self.registry.remove(task.id)

    # -- reconciliation --------------------------------------------------

    def refresh_statuses(self) -> bool:
        """Mark running tasks whose process has disappeared as stopped.

        Used before listing and status display.

        Returns:
            True if any task changed.
        """
        changed = False
        for task in self.registry:
            if task.status is not TaskStatus.RUNNING:
                continue
            if task.pid is None or not self.supervisor.is_running(task.pid):
                task.mark_stopped()
                changed = True
        if changed:
            self.registry.persist()
        return changed

    def cleanup(self) -> list[Task]:
        """Reap finished children and mark dead running tasks as failed.

        Used by the daemon on every tick. Exit codes are attached when the
        process was reaped by this supervisor.

        Returns:
            The tasks that were marked failed.
        """
        exit_codes = self.supervisor.reap_zombies()
        failed: list[Task] = []
        for task in self.registry:
            if task.status is not TaskStatus.RUNNING:
                continue
            if task.pid is not None and self.supervisor.is_running(task.pid):
                continue
            exit_code = exit_codes.get(task.id)
            task.mark_failed(exit_code)
            failed.append(task)
            self._logger.info(
                "task_exited", task_id=task.id, name=task.name, exit_code=exit_code
            )
        if failed:
            self.registry.persist()
        return failed

    def restart_candidates(self) -> list[Task]:
        """Return failed auto-restart tasks still under the attempt cap."""
        return [
            task
            for task in self.registry
            if task.auto_restart
            and task.status is TaskStatus.FAILED
            and task.restart_count <= self.max_restart_attempts
        ]

    def check_and_restart(self) -> list[Task]:
        """Attempt to restart every eligible failed task, in registry order.

        Failures are logged and leave the task failed for the next round.

        Returns:
            The tasks that were restarted successfully.
        """
        restarted: list[Task] = []
        for task in self.restart_candidates():
            task.restart_count += 1
            self.registry.persist()
            self._logger.info(
                "auto_restart_attempt",
                task_id=task.id,
                name=task.name,
                attempt=task.restart_count,
                max_attempts=self.max_restart_attempts,
            )
            time.sleep(self.restart_delay)
            try:
                _ = self._start(task)
            except (HyperVError, OSError) as e:
                self._logger.warning(
                    "auto_restart_failed", task_id=task.id, name=task.name, error=str(e)
                )
                task.mark_failed()
                self.registry.persist()
            else:
                restarted.append(task)
        return restarted

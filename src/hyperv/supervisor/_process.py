"""Process supervisor for spawning, probing, stopping, and reaping children.

This module provides the ProcessSupervisor class, which owns the table of
live ``subprocess.Popen`` handles keyed by task id. Task records only carry
a pid; the handles never leave this class.
"""

from __future__ import annotations

import os
import signal
import subprocess
import time
from typing import TYPE_CHECKING, final

from hyperv.exceptions import ProcessStartError, ProcessStopError
from hyperv.utils import create_null_logger

from ._binary import validate_binary

if TYPE_CHECKING:
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from hyperv.tasks import Task


@final
class ProcessSupervisor:
    """Launches task processes and tracks their handles.

    One instance is created per process and injected wherever processes are
    started or stopped, so the handle table is never shared through globals.
    """

    __slots__ = ("_handles", "_logger", "kill_settle", "shutdown_timeout")

    def __init__(
        self,
        *,
        shutdown_timeout: float = 2.0,
        kill_settle: float = 0.5,
        logger: FilteringBoundLogger | None = None,
    ) -> None:
        """Initialize the supervisor.

        Args:
            shutdown_timeout: Seconds to wait after SIGTERM before SIGKILL.
            kill_settle: Seconds to wait after SIGKILL.
            logger: Optional structured logger.
        """
        self.shutdown_timeout = shutdown_timeout
        self.kill_settle = kill_settle
        self._logger: FilteringBoundLogger = logger or create_null_logger()
        self._handles: dict[str, subprocess.Popen[bytes]] = {}

    @property
    def running_count(self) -> int:
        """Return the number of tracked handles."""
        return len(self._handles)

    def is_tracked(self, task_id: str) -> bool:
        return task_id in self._handles

    def validate_binary(self, binary: str) -> None:
        """Check that a binary can be launched.

        Raises:
            BinaryNotFoundError: If the path does not exist.
            BinaryNotExecutableError: If no execute bit is set.
            InterpreterNotFoundError: If a shebang names a missing interpreter.
        """
        validate_binary(binary, logger=self._logger)

    def start(
        self,
        task: Task,
        env: dict[str, str],
        stdout_log: Path,
        stderr_log: Path,
    ) -> int:
        """Spawn a task's process with output appended to its log files.

        The child runs in its own process group so stop signals reach any
        grandchildren it spawns.

        Args:
            task: The task to launch.
            env: Variables overlaid on the current environment.
            stdout_log: File receiving stdout.
            stderr_log: File receiving stderr.

        Returns:
            The pid of the new process.

        Raises:
            BinaryError: If the binary fails validation.
            ProcessStartError: If the process cannot be spawned.
        """
        self.validate_binary(task.binary)

        command = [task.binary, *task.args]
        try:
            stdout_log.parent.mkdir(parents=True, exist_ok=True)
            stderr_log.parent.mkdir(parents=True, exist_ok=True)
            with stdout_log.open("ab") as out, stderr_log.open("ab") as err:
                process = subprocess.Popen(  # noqa: S603
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=out,
                    stderr=err,
                    cwd=task.workdir,
                    env={**os.environ, **env},
                    process_group=0,
                )
        except OSError as e:
            msg = f"Failed to start process '{task.binary}': {e}"
            raise ProcessStartError(msg, binary=task.binary, cause=e) from e

        self._handles[task.id] = process
        self._logger.info(
            "process_spawned",
            task_id=task.id,
            name=task.name,
            pid=process.pid,
            command=command,
        )
        return process.pid

    def is_running(self, pid: int) -> bool:
        """Probe whether a pid is alive with signal 0.

        Any failure, including permission denied, reports not running.
        """
        try:
            os.kill(pid, 0)
        except OSError:
            return False
        return True

    def _is_alive(self, task_id: str, pid: int) -> bool:
        handle = self._handles.get(task_id)
        if handle is not None and handle.pid == pid and handle.poll() is not None:
            return False
        return self.is_running(pid)

    def _send_signal(self, pid: int, sig: signal.Signals) -> OSError | None:
        """Signal the process group, falling back to the pid alone.

        Returns:
            None if a delivery succeeded, else the last error.
        """
        killpg = getattr(os, "killpg", None)
        if killpg is not None:
            try:
                killpg(pid, sig)
            except OSError:
                pass
            else:
                self._logger.debug("signal_sent", pid=pid, signal=sig.name, group=True)
                return None

        try:
            os.kill(pid, sig)
        except OSError as e:
            return e
        self._logger.debug("signal_sent", pid=pid, signal=sig.name, group=False)
        return None

    def stop(self, task_id: str, pid: int) -> None:
        """Stop a process: SIGTERM, wait, then SIGKILL if still alive.

        Stopping an already-dead process succeeds. The handle for
        ``task_id`` is dropped in every outcome.

        Args:
            task_id: Task owning the process.
            pid: Process to stop.

        Raises:
            ProcessStopError: If SIGTERM or SIGKILL cannot be delivered to a
                live process.
        """
        try:
            if not self._is_alive(task_id, pid):
                self._logger.debug("process_already_stopped", task_id=task_id, pid=pid)
                return

            error = self._send_signal(pid, signal.SIGTERM)
            if error is not None:
                if not self._is_alive(task_id, pid):
                    return
                msg = f"Failed to send SIGTERM to process {pid}: {error}"
                raise ProcessStopError(msg, pid=pid, cause=error)

            time.sleep(self.shutdown_timeout)

            if self._is_alive(task_id, pid):
                self._logger.info("process_kill_escalated", task_id=task_id, pid=pid)
                error = self._send_signal(pid, signal.SIGKILL)
                if error is None:
                    time.sleep(self.kill_settle)
                elif self._is_alive(task_id, pid):
                    msg = f"Failed to send SIGKILL to process {pid}: {error}"
                    raise ProcessStopError(msg, pid=pid, cause=error)

            self._logger.info("process_stopped", task_id=task_id, pid=pid)
        finally:
            handle = self._handles.pop(task_id, None)
            if handle is not None:
                _ = handle.poll()

    def reap_zombies(self) -> dict[str, int]:
        """Collect exit statuses of finished tracked processes.

        Finished handles are removed. Processes killed by a signal have no
        exit code and are left out of the result.

        Returns:
            Mapping of task id to exit code.
        """
        exit_codes: dict[str, int] = {}
        for task_id, handle in list(self._handles.items()):
            returncode = handle.poll()
            if returncode is None:
                continue
            del self._handles[task_id]
            self._logger.info(
                "task_reaped", task_id=task_id, pid=handle.pid, returncode=returncode
            )
            if returncode >= 0:
                exit_codes[task_id] = returncode
        return exit_codes

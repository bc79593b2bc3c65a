"""Data models for supervised tasks.

This module defines the core data types for the task registry:
- TaskStatus: Lifecycle states of a task
- Task: Declared configuration plus last-known runtime state
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


def now_iso() -> str:
    """Get current timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat()


class TaskStatus(StrEnum):
    """Task lifecycle states.

    - STOPPED: Not running (never started, stopped, or found dead by a probe)
    - RUNNING: Believed running; ``pid`` identifies the process
    - FAILED: Start failed or the daemon reaped the process
    """

    STOPPED = "stopped"
    RUNNING = "running"
    FAILED = "failed"

    @property
    def icon(self) -> str:
        """Return a status marker for terminal display."""
        return _STATUS_ICONS[self]


_STATUS_ICONS: dict[TaskStatus, str] = {
    TaskStatus.STOPPED: "🔴",
    TaskStatus.RUNNING: "🟢",
    TaskStatus.FAILED: "🟡",
}


@dataclass(slots=True)
class Task:
    """A registered executable and its last-known runtime state.

    Records are owned by the TaskRegistry and mutated in place by lifecycle
    operations; every mutation is followed by a full registry save.

    Attributes:
        id: Unique identifier (uuid4 string), immutable.
        name: User-chosen label, unique within the registry.
        binary: Path to the executable or script.
        args: Command-line arguments, in order.
        env: Explicit environment; overrides ``.env`` values from workdir.
        workdir: Working directory for the process, if any.
        auto_restart: Whether the daemon relaunches the task after a failure.
        status: Current lifecycle state.
        created_at: ISO 8601 creation timestamp.
        pid: Process ID while running. A cached value that may be stale.
        stdout_log_path: File receiving the process's stdout.
        stderr_log_path: File receiving the process's stderr.
        last_started: ISO 8601 timestamp of the last successful start.
        restart_count: Auto-restart attempts made so far. Never reset.
        last_exit_code: Exit code recorded when the daemon reaped the process.
    """

    id: str
    name: str
    binary: str
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    workdir: str | None = None
    auto_restart: bool = False
    status: TaskStatus = TaskStatus.STOPPED
    created_at: str = field(default_factory=now_iso)
    pid: int | None = None
    stdout_log_path: str | None = None
    stderr_log_path: str | None = None
    last_started: str | None = None
    restart_count: int = 0
    last_exit_code: int | None = None

    @property
    def short_id(self) -> str:
        """Return the first eight characters of the id."""
        return self.id[:8]

    def mark_running(self, pid: int) -> None:
        self.status = TaskStatus.RUNNING
        self.pid = pid
        self.last_started = now_iso()

    def mark_stopped(self) -> None:
        self.status = TaskStatus.STOPPED
        self.pid = None

    def mark_failed(self, exit_code: int | None = None) -> None:
        """Mark the task failed, keeping any previous exit code if none is given."""
        self.status = TaskStatus.FAILED
        self.pid = None
        if exit_code is not None:
            self.last_exit_code = exit_code

    def matches(self, identifier: str) -> bool:
        """Check whether ``identifier`` is this task's name, id, or id prefix."""
        return (
            self.name == identifier
            or self.id == identifier
            or self.id.startswith(identifier)
        )

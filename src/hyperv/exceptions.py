"""hyperv exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class HyperVError(Exception):
    """Base exception for hyperv errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(HyperVError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected


# =============================================================================
# Task Exceptions
# =============================================================================


class TaskError(HyperVError):
    """Base exception for task registry and lifecycle errors."""


class TaskNotFoundError(TaskError, KeyError):
    """Raised when no task matches an identifier.

    Attributes:
        identifier: The name, id, or id prefix that was looked up.
    """

    def __init__(self, message: str, *, identifier: str) -> None:
        """Initialize with error message and lookup context.

        Args:
            message: Human-readable error message.
            identifier: The identifier that did not match any task.
        """
        super().__init__(message)
        self.identifier: str = identifier

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0])


class TaskExistsError(TaskError, ValueError):
    """Raised when a task name is already registered.

    Attributes:
        name: The conflicting task name.
    """

    def __init__(self, message: str, *, name: str) -> None:
        """Initialize with error message and conflicting name.

        Args:
            message: Human-readable error message.
            name: The task name that already exists.
        """
        super().__init__(message)
        self.name: str = name


class TaskAlreadyRunningError(TaskError):
    """Raised when starting a task whose process is still alive."""

    def __init__(self, message: str, *, name: str, pid: int | None = None) -> None:
        """Initialize with error message and task context."""
        super().__init__(message)
        self.name: str = name
        self.pid: int | None = pid


class InvalidEnvVarError(TaskError, ValueError):
    """Raised when an environment assignment is not in KEY=VALUE form."""

    def __init__(self, message: str, *, assignment: str) -> None:
        """Initialize with error message and offending assignment."""
        super().__init__(message)
        self.assignment: str = assignment


class WorkdirNotFoundError(TaskError):
    """Raised when a task's working directory does not exist at start time."""

    def __init__(self, message: str, *, workdir: str) -> None:
        """Initialize with error message and missing directory."""
        super().__init__(message)
        self.workdir: str = workdir


class InvalidLogTypeError(HyperVError, ValueError):
    """Raised when a log stream selector is not stdout, stderr, or both."""

    def __init__(self, message: str, *, log_type: str) -> None:
        """Initialize with error message and offending selector."""
        super().__init__(message)
        self.log_type: str = log_type


class LogIOError(HyperVError):
    """Raised when a task log file cannot be rotated.

    Attributes:
        path: Path to the log file.
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and I/O context."""
        super().__init__(message)
        self.path: Path = path
        self.cause: Exception | None = cause


# =============================================================================
# Binary Exceptions
# =============================================================================


class BinaryError(HyperVError):
    """Base exception for binary integrity problems.

    Attributes:
        binary: Path of the binary (or interpreter) at fault.
    """

    def __init__(self, message: str, *, binary: str) -> None:
        """Initialize with error message and binary path."""
        super().__init__(message)
        self.binary: str = binary


class BinaryNotFoundError(BinaryError):
    """Raised when the binary path does not exist."""


class BinaryNotExecutableError(BinaryError):
    """Raised when the binary has no execute permission bit set."""


class InterpreterNotFoundError(BinaryError):
    """Raised when a script's shebang names a missing interpreter."""


class InvalidBinaryError(BinaryError):
    """Raised when the binary is structurally unusable (directory, empty file)."""


# =============================================================================
# Process Exceptions
# =============================================================================


class ProcessError(HyperVError):
    """Base exception for process operation errors."""


class ProcessStartError(ProcessError):
    """Raised when spawning a process fails.

    Attributes:
        binary: The binary that failed to start.
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        binary: str,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and spawn context."""
        super().__init__(message)
        self.binary: str = binary
        self.cause: Exception | None = cause


class ProcessStopError(ProcessError):
    """Raised when a termination signal cannot be delivered to a live process."""

    def __init__(
        self,
        message: str,
        *,
        pid: int,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and signal context."""
        super().__init__(message)
        self.pid: int = pid
        self.cause: Exception | None = cause


# =============================================================================
# Persistence Exceptions
# =============================================================================


class RegistryError(HyperVError):
    """Base exception for registry persistence errors."""


class RegistryIOError(RegistryError):
    """Raised when the registry file cannot be written.

    Attributes:
        path: Path to the registry file.
        cause: The underlying exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and I/O context."""
        super().__init__(message)
        self.path: Path = path
        self.cause: Exception | None = cause


class SerializationError(RegistryError):
    """Raised when task records cannot be serialized."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        """Initialize with error message and underlying cause."""
        super().__init__(message)
        self.cause: Exception | None = cause

"""Binary integrity checks.

``validate_binary`` is the gate run before every spawn. ``diagnose_binary``
runs the same checks and more, collecting every finding with a hint so the
``diagnose`` command can explain why a task will not start.
"""

from __future__ import annotations

import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from hyperv.exceptions import (
    BinaryError,
    BinaryNotExecutableError,
    BinaryNotFoundError,
    InterpreterNotFoundError,
    InvalidBinaryError,
)
from hyperv.utils import create_null_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

HEADER_SIZE = 512

_EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH

# (magic prefix, format name)
_BINARY_FORMATS: tuple[tuple[bytes, str], ...] = (
    (b"\x7fELF", "ELF executable (Linux/Unix)"),
    (b"\xcf\xfa\xed\xfe", "Mach-O 64-bit executable (macOS)"),
    (b"\xce\xfa\xed\xfe", "Mach-O 32-bit executable (macOS)"),
    (b"MZ", "PE executable (Windows)"),
)


def _read_header(path: Path) -> bytes:
    with path.open("rb") as f:
        return f.read(HEADER_SIZE)


def parse_shebang(header: bytes) -> str | None:
    """Return the interpreter named by a ``#!`` line, if any.

    The interpreter is the first whitespace-separated token after ``#!``.
    """
    if not header.startswith(b"#!"):
        return None
    first_line = header[2:].split(b"\n", 1)[0]
    tokens = first_line.decode("utf-8", errors="replace").split()
    return tokens[0] if tokens else None


def is_text(header: bytes) -> bool:
    """Check whether a header looks like plain ASCII text."""
    return header.isascii() and b"\x00" not in header


def sniff_format(header: bytes) -> str | None:
    """Identify a native executable format from its magic bytes."""
    for magic, name in _BINARY_FORMATS:
        if header.startswith(magic):
            return name
    return None


def validate_binary(
    binary: str,
    *,
    logger: FilteringBoundLogger | None = None,
) -> None:
    """Check that ``binary`` can be launched.

    Args:
        binary: Path to the executable or script.
        logger: Optional logger for non-fatal warnings.

    Raises:
        BinaryNotFoundError: If the path does not exist.
        BinaryNotExecutableError: If no execute bit is set.
        InterpreterNotFoundError: If a shebang names a missing interpreter.
    """
    log = logger or create_null_logger()
    path = Path(binary)

    if not path.exists():
        msg = f"Binary not found: {binary}"
        raise BinaryNotFoundError(msg, binary=binary)

    if not path.stat().st_mode & _EXECUTABLE_BITS:
        msg = f"Binary is not executable: {binary} (try: chmod +x {binary})"
        raise BinaryNotExecutableError(msg, binary=binary)

    if not path.is_file():
        return

    try:
        header = _read_header(path)
    except OSError as e:
        log.warning("binary_header_unreadable", binary=binary, error=str(e))
        return

    interpreter = parse_shebang(header)
    if interpreter is not None:
        if not Path(interpreter).exists():
            msg = f"Script interpreter not found: {interpreter}"
            raise InterpreterNotFoundError(msg, binary=interpreter)
        return

    if is_text(header):
        log.warning("binary_missing_shebang", binary=binary)


@dataclass(slots=True, frozen=True)
class Finding:
    """A single diagnosis line.

    Attributes:
        ok: Whether the check passed.
        message: What was observed.
        hint: Suggested fix, if the check failed.
    """

    ok: bool
    message: str
    hint: str | None = None


@dataclass(slots=True)
class BinaryDiagnosis:
    """Result of diagnosing a binary.

    Attributes:
        binary: Path that was inspected.
        findings: Checks performed, in order.
        error: The first fatal problem, or None if the binary looks runnable.
    """

    binary: str
    findings: list[Finding] = field(default_factory=list)
    error: BinaryError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def passed(self, message: str) -> None:
        self.findings.append(Finding(ok=True, message=message))

    def failed(self, error: BinaryError, hint: str | None = None) -> BinaryDiagnosis:
        self.findings.append(Finding(ok=False, message=str(error), hint=hint))
        self.error = error
        return self


def diagnose_binary(binary: str) -> BinaryDiagnosis:  # noqa: PLR0911
    """Inspect a binary and report every check with hints.

    Stops at the first fatal problem.

    Args:
        binary: Path to the executable or script.

    Returns:
        The ordered findings plus the fatal error, if any.
    """
    diagnosis = BinaryDiagnosis(binary=binary)
    path = Path(binary)

    if not path.exists():
        return diagnosis.failed(
            BinaryNotFoundError(f"Binary not found: {binary}", binary=binary),
            hint="Check the path or recreate the task with the correct binary",
        )
    diagnosis.passed("File exists")

    if path.is_dir():
        return diagnosis.failed(
            InvalidBinaryError(f"Path is a directory: {binary}", binary=binary)
        )
    diagnosis.passed("Is a file")

    st = path.stat()
    mode = stat.S_IMODE(st.st_mode)
    if not mode & _EXECUTABLE_BITS:
        return diagnosis.failed(
            BinaryNotExecutableError(
                f"Not executable (permissions: {mode:o})", binary=binary
            ),
            hint=f"chmod +x {binary}",
        )
    diagnosis.passed(f"Executable (permissions: {mode:o})")

    if st.st_size == 0:
        return diagnosis.failed(
            InvalidBinaryError(f"File is empty: {binary}", binary=binary)
        )
    diagnosis.passed(f"File size: {st.st_size} bytes")

    try:
        header = _read_header(path)
    except OSError as e:
        return diagnosis.failed(
            InvalidBinaryError(f"Cannot read file: {e}", binary=binary)
        )

    if not is_text(header):
        native = sniff_format(header)
        diagnosis.passed(f"Binary file: {native or 'unknown format'}")
        return diagnosis

    interpreter = parse_shebang(header)
    if interpreter is None:
        diagnosis.findings.append(
            Finding(
                ok=False,
                message="Text file without shebang",
                hint="Add a shebang line, e.g. #!/bin/bash or #!/usr/bin/env python3",
            )
        )
        return diagnosis

    diagnosis.passed(f"Script with interpreter: {interpreter}")
    if not Path(interpreter).exists():
        return diagnosis.failed(
            InterpreterNotFoundError(
                f"Interpreter not found: {interpreter}", binary=interpreter
            ),
            hint="Install the interpreter or fix the shebang line",
        )
    diagnosis.passed("Interpreter exists")
    return diagnosis

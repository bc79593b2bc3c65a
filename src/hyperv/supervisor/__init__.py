"""Process supervision for hyperv tasks.

This package provides the process table used to spawn, probe, stop, and
reap task processes, binary validation and diagnosis, and the restart
controller that runs the daemon loop.

Example:
    >>> supervisor = ProcessSupervisor(shutdown_timeout=2.0)
    >>> supervisor.is_running(999999)
    False
"""

from ._binary import (
    BinaryDiagnosis,
    Finding,
    diagnose_binary,
    is_text,
    parse_shebang,
    sniff_format,
    validate_binary,
)
from ._controller import DEFAULT_TICK_INTERVAL, RestartController
from ._process import ProcessSupervisor

__all__ = [
    "DEFAULT_TICK_INTERVAL",
    "BinaryDiagnosis",
    "Finding",
    "ProcessSupervisor",
    "RestartController",
    "diagnose_binary",
    "is_text",
    "parse_shebang",
    "sniff_format",
    "validate_binary",
]

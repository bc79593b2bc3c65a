"""Default configuration values.

This module defines the built-in default configuration values that are used
when no other configuration sources provide values.

Note: DEFAULT_CONFIG is intentionally a plain dict for type compatibility
with functions like deep_merge. The merge functions create copies, so mutation
of the original is not a concern in practice.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
        "max_bytes": 5 * 1024 * 1024,
        "backup_count": 3,
    },
    "supervisor": {
        "shutdown_timeout": 2.0,
        "kill_settle": 0.5,
        "max_restart_attempts": 5,
        "restart_delay": 1.0,
        "tick_interval": 5.0,
    },
    "logs": {
        "max_size": 10 * 1024 * 1024,
        "follow_interval": 0.1,
        "default_lines": 50,
    },
    "paths": {
        "home": "",
    },
}

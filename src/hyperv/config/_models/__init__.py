"""Configuration models."""

from ._common import LogFormat, LogLevel
from ._config import Config
from ._logging import LoggingConfig
from ._logs import LogsConfig
from ._paths import PathsConfig
from ._supervisor import SupervisorConfig

__all__ = [
    "Config",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "LogsConfig",
    "PathsConfig",
    "SupervisorConfig",
]

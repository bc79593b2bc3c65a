"""hyperv configuration.

This module provides the public API for hyperv configuration management,
including loading, validation, and typed access to configuration values.

Example:
    >>> from hyperv.config import Config
    >>> config = Config.load()
    >>> config.supervisor.shutdown_timeout
    2.0
"""

from hyperv.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._load import safe_load_config
from ._loader import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    LogFormat,
    LoggingConfig,
    LogLevel,
    LogsConfig,
    PathsConfig,
    SupervisorConfig,
)

__all__ = [
    "DEFAULT_CONFIG",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "LogsConfig",
    "PathsConfig",
    "SupervisorConfig",
    "deep_merge",
    "parse_env_vars",
    "parse_string_value",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
]

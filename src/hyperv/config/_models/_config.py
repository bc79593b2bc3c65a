# pyright: reportExplicitAny=false, reportAny=false
"""Configuration container with typed access.

This module provides the main Config class that serves as the primary
interface for accessing hyperv configuration values.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

from hyperv.config._defaults import DEFAULT_CONFIG
from hyperv.config._loader import deep_merge, parse_env_vars, read_toml_file
from hyperv.config._models._logging import LoggingConfig
from hyperv.config._models._logs import LogsConfig
from hyperv.config._models._paths import PathsConfig
from hyperv.config._models._supervisor import SupervisorConfig
from hyperv.exceptions import ConfigValidationError

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Self


class Config(BaseModel):
    """Configuration container with typed access.

    This class provides immutable, type-safe access to hyperv configuration.
    Use factory methods to create instances rather than the constructor.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    supervisor: SupervisorConfig = SupervisorConfig()
    logs: LogsConfig = LogsConfig()
    paths: PathsConfig = PathsConfig()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Create configuration from a dictionary.

        Args:
            data: Dictionary of configuration values, merged over defaults.

        Returns:
            Configuration object from the dictionary.

        Raises:
            ConfigValidationError: If a value has the wrong type or range.
        """
        merged = deep_merge(DEFAULT_CONFIG, data)
        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            first = e.errors()[0]
            key = ".".join(str(part) for part in first["loc"])
            msg = f"Invalid configuration value for '{key}': {first['msg']}"
            raise ConfigValidationError(
                msg,
                key=key,
                value=first.get("input"),
                expected=first["type"],
            ) from e

    @classmethod
    def from_file(cls, path: Path) -> Self:
        """Create configuration from a single TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigLoadError: If the file cannot be parsed.
            ConfigValidationError: If validation fails.
        """
        return cls.from_dict(read_toml_file(path))

    @classmethod
    def load(
        cls,
        *,
        config_path: Path | None = None,
        include_env: bool = True,
        cli_overrides: dict[str, Any] | None = None,
    ) -> Self:
        """Load configuration from all sources.

        Precedence, lowest to highest: defaults, ``config.toml``,
        ``HYPERV_*`` environment variables, CLI overrides. A missing
        config file is not an error.

        Args:
            config_path: TOML file to read (defaults to ``<home>/config.toml``).
            include_env: Whether to apply ``HYPERV_*`` environment variables.
            cli_overrides: Values from command-line flags.

        Returns:
            The merged configuration.
        """
        from hyperv.utils import get_config_file  # noqa: PLC0415

        path = config_path if config_path is not None else get_config_file()
        data: dict[str, Any] = {}
        if path.is_file():
            data = read_toml_file(path)
        if include_env:
            data = deep_merge(data, parse_env_vars(environ=os.environ))
        if cli_overrides:
            data = deep_merge(data, cli_overrides)
        return cls.from_dict(data)

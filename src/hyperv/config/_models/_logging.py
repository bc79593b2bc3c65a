"""Logging configuration model.

This module provides the LoggingConfig Pydantic model for logging settings.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from hyperv.config._models._common import LogFormat, LogLevel

_FIVE_MEGABYTES = 5 * 1024 * 1024


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty uses ``<home>/hyperv.log``).
        max_bytes: Size past which the log file rotates (0 disables rotation).
        backup_count: Number of rotated log files to keep.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""
    max_bytes: int = Field(default=_FIVE_MEGABYTES, ge=0)
    backup_count: int = Field(default=3, ge=0)

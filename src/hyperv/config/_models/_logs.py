"""Task log configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

_TEN_MEGABYTES = 10 * 1024 * 1024


class LogsConfig(BaseModel):
    """Settings for task stdout/stderr logs.

    Attributes:
        max_size: Size in bytes past which a log is rotated at task start.
        follow_interval: Poll interval in seconds for ``logs --follow``.
        default_lines: Number of lines shown by ``logs`` by default.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    max_size: int = Field(default=_TEN_MEGABYTES, gt=0)
    follow_interval: float = Field(default=0.1, gt=0)
    default_lines: int = Field(default=50, ge=0)

"""Filesystem location configuration model."""

from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class PathsConfig(BaseModel):
    """Locations of the registry and log directories.

    Attributes:
        home: Override for the hyperv home directory (empty uses the default).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    home: str = ""

    def resolve_home(self, default: Path) -> Path:
        """Return the configured home, or ``default`` when unset."""
        return Path(self.home).expanduser() if self.home else default

"""Supervisor configuration model."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class SupervisorConfig(BaseModel):
    """Process supervision and restart settings.

    Attributes:
        shutdown_timeout: Seconds between SIGTERM and SIGKILL escalation.
        kill_settle: Seconds to wait after SIGKILL.
        max_restart_attempts: Auto-restart cap; tasks are retried while
            ``restart_count <= max_restart_attempts``.
        restart_delay: Seconds to sleep before each auto-restart attempt.
        tick_interval: Seconds between daemon ticks.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    shutdown_timeout: float = Field(default=2.0, ge=0)
    kill_settle: float = Field(default=0.5, ge=0)
    max_restart_attempts: int = Field(default=5, ge=0)
    restart_delay: float = Field(default=1.0, ge=0)
    tick_interval: float = Field(default=5.0, gt=0)

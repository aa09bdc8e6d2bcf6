"""Application configuration settings.

This module defines the ``Settings`` class using ``pydantic-settings`` to
load configuration from environment variables (and an optional ``.env``
file). It centralises all runtime configuration for the service, such as
the simulated clock cadence, the offset range offered to operators and how
strictly new bookings are validated.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration values loaded from environment variables.

    Environment variable names map to fields by alias. Every value has a
    default, so the service starts with no environment at all.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    # Simulated clock
    tick_seconds: float = Field(
        default=1.0,
        alias="TICK_SECONDS",
        description="Interval (in seconds) between wall-clock samples of the simulated clock.",
    )
    max_offset_hours: int = Field(
        default=24,
        alias="MAX_OFFSET_HOURS",
        description="Offsets set through the API are clamped to plus or minus this many hours.",
    )
    offset_step_minutes: int = Field(
        default=60,
        alias="OFFSET_STEP_MINUTES",
        description="Step size advertised to the UI for the time-travel slider.",
    )

    # Bookings
    reject_overlapping_schedules: bool = Field(
        default=True,
        alias="REJECT_OVERLAPPING_SCHEDULES",
        description="Refuse a booking that overlaps another booking of the same room.",
    )
    quick_max_duration_hours: int = Field(
        default=8,
        alias="QUICK_MAX_DURATION_HOURS",
        description="Longest booking, in hours, accepted by the quick-add form.",
    )
    seed_demo_data: bool = Field(
        default=True,
        alias="SEED_DEMO_DATA",
        description="Load the demo rooms and bookings at start-up.",
    )

    # Service
    enable_cors: bool = Field(default=False, alias="ENABLE_CORS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def max_offset_ms(self) -> int:
        return self.max_offset_hours * 60 * 60 * 1000

    @property
    def offset_step_ms(self) -> int:
        return self.offset_step_minutes * 60 * 1000


# Instantiate settings at module import time. This allows other modules to
# import ``settings`` directly without repeatedly reading environment variables.
settings = Settings()

"""Engine configuration with startup validation.

Values come from the environment (prefix CL_) or a local .env file and are
validated once at import time via pydantic-settings. A bad timezone name or
a non-positive history cap fails immediately with a clear error.
"""

import pytz
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "CL_", "env_file": ".env"}

    # Local timezone used to bucket timestamps into hours of the day
    timezone: str = "UTC"

    # Defaults applied when a caller does not supply them
    default_age: int = 25
    default_exposure_minutes: int = 60

    # History bounds (7 days at one-minute resolution)
    history_max_points: int = 10080
    biological_time_window: int = 24

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Reject names pytz cannot resolve."""
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @field_validator("history_max_points", "biological_time_window", "default_exposure_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value


settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings

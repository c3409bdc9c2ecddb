from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Window and pacing options, read from RPS_* environment variables."""
    result_delay_ms: int = Field(default=1000, ge=0)
    fullscreen: bool = False
    window_title: str = "Epic Rock Paper Scissors Battle"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="RPS_", env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value):
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


@lru_cache()
def get_settings():
    return Settings()

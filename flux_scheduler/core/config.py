from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FLUX_",
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    # Observability
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"
    ENABLE_METRICS: bool = True

    # Engine guards
    # One year of hourly steps before a schedule is declared unresolvable
    STRETCH_MAX_ITERATIONS: int = Field(default=366 * 24, gt=0)
    DEFAULT_COMPACT_HORIZON_HOURS: int = Field(default=8, gt=0)


settings = Settings()

"""Application settings and logging setup."""

import sys
from functools import lru_cache
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LotterySettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LOTTERY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    config_path: Path = Field(
        default=Path("lottery.json"), description="JSON prize table to load"
    )
    storage_dir: Path = Field(
        default=Path(".lottery"), description="Directory holding the saved lottery state"
    )
    log_level: str = Field(default="INFO", description="Loguru log level")
    draw_animation_frames: int = Field(
        default=5, ge=0, description="Placeholder frames shown before results"
    )
    draw_animation_interval: float = Field(
        default=0.1, ge=0.0, description="Seconds between animation frames"
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache
def get_settings() -> LotterySettings:
    return LotterySettings()


def configure_logging(level: str) -> None:
    """Send loguru output to stderr at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level)

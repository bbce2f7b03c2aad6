"""
Configuration management for the Missile Command shell.
Uses pydantic-settings for environment variable parsing.

Gameplay tuning lives in gameplay/constants.py, not here.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from missile_command.gameplay.constants import BEST_SCORE_STORAGE_KEY


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MISSILE_COMMAND_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Persistence
    best_score_path: Path = Field(
        default=Path("~/.missile_command/best_score.json"),
        description="JSON file holding the best score"
    )
    best_score_key: str = Field(
        default=BEST_SCORE_STORAGE_KEY,
        description="Key the best score is stored under"
    )

    # Display
    target_fps: int = Field(
        default=60,
        ge=1,
        le=240,
        description="Frame rate cap. Motion advances one step per frame"
    )
    window_title: str = Field(default="Missile Command")

    # Audio
    audio_enabled: bool = Field(
        default=True,
        description="Open the mixer at startup. Disable on machines without sound"
    )
    volume: float = Field(default=0.6, ge=0.0, le=1.0)
    muted: bool = Field(default=False, description="Start muted (toggle with M)")

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ...)"
    )

    # Randomness
    rng_seed: Optional[int] = Field(
        default=None,
        description="Seed for spawn randomness. Unset means a fresh seed per run"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    """
    return Settings()

"""Configuration management using Pydantic settings."""

from __future__ import annotations

import math

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TacticsSettings(BaseSettings):
    """Tactical layer settings loaded from ``SKIRMISH_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SKIRMISH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Decision cadence
    actions_per_minute: int = Field(default=300, gt=0)
    mission_update_divisor: int = Field(default=3, gt=0)  # missions run every Nth decision tick

    # Mission factories
    enable_attack: bool = True
    enable_naval: bool = True
    enable_scouting: bool = True

    # Debug text per mission
    debug: bool = False


def ticks_per_decision(tick_rate: int, actions_per_minute: int) -> int:
    """Game ticks between two decisions so the agent stays under its APM."""
    if actions_per_minute <= 0:
        raise ValueError(f"actions_per_minute must be positive, got {actions_per_minute}")
    return max(1, math.ceil(tick_rate / (actions_per_minute / 60)))


settings = TacticsSettings()

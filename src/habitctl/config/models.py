"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, habitctl.toml only contains
overrides.  Most users need only ``[user] time_zone``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class UserConfig(BaseModel):
    """[user] section — where a user's day starts and ends."""

    model_config = {"frozen": True}

    time_zone: str = "UTC"
    grace_minutes: int = Field(default=180, ge=0)


class HistoryConfig(BaseModel):
    """[history] section — lookback windows."""

    model_config = {"frozen": True}

    streak_lookback_days: int = Field(default=365, ge=1)
    heatmap_weeks: int = Field(default=52, ge=1)

"""
Application settings loaded from environment variables.
It centralizes cross-cutting concerns like settings and logging used by the chart pipeline.
Keeping these helpers isolated keeps the snapshot, query, and chart modules focused on data flow.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class Settings(BaseModel):
    """Typed runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    PROJECT_NAME: str = "btc-holdings-chart"
    ENV: str = "local"
    LOG_LEVEL: str = "INFO"

    @field_validator("LOG_LEVEL")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level_name = value.strip().upper()
        if not isinstance(logging.getLevelName(level_name), int):
            raise ValueError(f"unknown log level {value!r}")
        return level_name


def load_settings(*, load_env: bool = True) -> Settings:
    """Load and validate environment settings from `.env` and process environment."""

    if load_env:
        load_dotenv()

    values = {key: value for key, value in os.environ.items() if value != ""}
    try:
        return Settings.model_validate(values)
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor for application settings."""

    return load_settings()

# This file defines runtime configuration for the holdings chart dashboard.
# It exists so the snapshot location, default holdings amount, and chart sizing can be tuned through
# environment variables without touching rendering code.

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from src.holdings_chart.multiplier_input import parse_multiplier


@dataclass(frozen=True)
class HoldingsAppConfig:
    snapshot_path: str
    default_multiplier: float
    snapshot_poll_seconds: float
    chart_height: int


def load_app_config(*, load_env: bool = True) -> HoldingsAppConfig:
    if load_env:
        load_dotenv()

    try:
        config = HoldingsAppConfig(
            snapshot_path=os.getenv("HOLDINGS_SNAPSHOT_PATH") or "data.sqlite3",
            default_multiplier=parse_multiplier(os.getenv("HOLDINGS_DEFAULT_MULTIPLIER", "1")),
            snapshot_poll_seconds=float(os.getenv("HOLDINGS_SNAPSHOT_POLL_SECONDS", "1")),
            chart_height=int(os.getenv("HOLDINGS_CHART_HEIGHT", "520")),
        )
    except ValueError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc

    if not config.snapshot_poll_seconds > 0:
        raise RuntimeError(
            "Invalid environment configuration: HOLDINGS_SNAPSHOT_POLL_SECONDS must be positive"
        )
    if config.chart_height <= 0:
        raise RuntimeError("Invalid environment configuration: HOLDINGS_CHART_HEIGHT must be positive")
    return config

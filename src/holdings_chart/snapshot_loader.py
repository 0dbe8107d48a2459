# This file reads and writes the pre-built SQLite price snapshot the chart is drawn from.
# It exists so the rest of the pipeline only ever sees an opaque byte buffer, never a file path.
# The writer side packages a price table into a snapshot at build time; runtime code never writes.
# A missing snapshot degrades to "no bytes" so the dashboard renders an empty chart instead of failing.

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pandas as pd
from sqlalchemy import create_engine

from src.holdings_chart.errors import SnapshotUnavailableError

LOGGER = logging.getLogger("holdings_chart")

PRICE_TABLE = "prices"
TIMESTAMP_COLUMN = "date"
PRICE_COLUMN = "price"

SnapshotSource = Callable[[], bytes | None]


def read_snapshot(path: str | Path) -> bytes:
    snapshot_path = Path(path)
    try:
        payload = snapshot_path.read_bytes()
    except FileNotFoundError as exc:
        raise SnapshotUnavailableError(f"Snapshot file not found: {snapshot_path}") from exc
    if not payload:
        raise SnapshotUnavailableError(f"Snapshot file is empty: {snapshot_path}")
    return payload


def snapshot_source(path: str | Path) -> SnapshotSource:
    """Return a loader callable that yields the snapshot bytes, or None when unavailable."""

    def load() -> bytes | None:
        try:
            return read_snapshot(path)
        except SnapshotUnavailableError as exc:
            LOGGER.warning("%s; chart will render without data", exc)
            return None

    return load


def write_price_snapshot(path: str | Path, prices: pd.DataFrame) -> int:
    """Write `prices` (epoch-second `date`, `price`) into a fresh snapshot file at `path`."""

    missing = {TIMESTAMP_COLUMN, PRICE_COLUMN}.difference(prices.columns)
    if missing:
        raise ValueError(f"Price frame is missing columns: {', '.join(sorted(missing))}")

    table = (
        prices[[TIMESTAMP_COLUMN, PRICE_COLUMN]]
        .astype({TIMESTAMP_COLUMN: "int64", PRICE_COLUMN: "float64"})
        .sort_values(TIMESTAMP_COLUMN, kind="stable")
        .reset_index(drop=True)
    )

    snapshot_path = Path(path)
    snapshot_path.parent.mkdir(parents=True, exist_ok=True)
    snapshot_path.unlink(missing_ok=True)

    engine = create_engine(f"sqlite:///{snapshot_path}", future=True)
    try:
        with engine.begin() as connection:
            table.to_sql(PRICE_TABLE, connection, index=False)
    finally:
        engine.dispose()

    LOGGER.info("snapshot written path=%s rows=%d", snapshot_path, len(table))
    return len(table)


def read_price_csv(path: str | Path) -> pd.DataFrame:
    """Read a `date,price` CSV (ISO dates or epoch seconds) into snapshot-ready rows."""

    raw = pd.read_csv(path)
    missing = {TIMESTAMP_COLUMN, PRICE_COLUMN}.difference(raw.columns)
    if missing:
        raise ValueError(f"CSV is missing columns: {', '.join(sorted(missing))}")

    dates = raw[TIMESTAMP_COLUMN]
    if pd.api.types.is_numeric_dtype(dates):
        epoch_seconds = dates
    else:
        parsed = pd.to_datetime(dates, utc=True, errors="coerce")
        epoch_seconds = (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(seconds=1)

    frame = pd.DataFrame(
        {
            TIMESTAMP_COLUMN: epoch_seconds,
            PRICE_COLUMN: pd.to_numeric(raw[PRICE_COLUMN], errors="coerce"),
        }
    ).dropna()
    # The chart's value axis is logarithmic.
    frame = frame[frame[PRICE_COLUMN] > 0]
    return (
        frame.astype({TIMESTAMP_COLUMN: "int64"})
        .sort_values(TIMESTAMP_COLUMN, kind="stable")
        .reset_index(drop=True)
    )

# This file defines the value objects that flow through the holdings chart pipeline.
# Query results, derived points, and chart series are frozen so every consumer can share them read-only.
# Equality is structural, which lets tests compare two transforms of the same inputs directly.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

Scalar = int | float | str | bytes | None

DEFAULT_SERIES_LABEL = "Holdings value"
DEFAULT_SERIES_COLOR = "#f2a900"


@dataclass(frozen=True)
class ResultSet:
    columns: tuple[str, ...]
    rows: tuple[tuple[Scalar, ...], ...]

    @classmethod
    def empty(cls) -> ResultSet:
        return cls(columns=(), rows=())

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows


@dataclass(frozen=True)
class TimeSeriesPoint:
    timestamp: datetime
    derived_value: float
    raw_value: float


@dataclass(frozen=True)
class Series:
    points: tuple[TimeSeriesPoint, ...] = field(default_factory=tuple)
    label: str = DEFAULT_SERIES_LABEL
    color: str = DEFAULT_SERIES_COLOR

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

# This file turns the raw price rows and the committed holdings amount into the chart series.
# The transform is pure; SeriesCache memoizes it on (result-set identity, multiplier) so reruns of the
# page with unchanged inputs skip the per-row work on multi-year daily data.

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from src.holdings_chart.models import (
    DEFAULT_SERIES_COLOR,
    DEFAULT_SERIES_LABEL,
    ResultSet,
    Series,
    TimeSeriesPoint,
)

Transformer = Callable[[ResultSet | None, float], Series]


def transform(
    result_set: ResultSet | None,
    multiplier: float,
    *,
    label: str = DEFAULT_SERIES_LABEL,
    color: str = DEFAULT_SERIES_COLOR,
) -> Series:
    """Scale each (timestamp, price) row by `multiplier`, preserving row order."""

    if result_set is None or result_set.is_empty:
        return Series(points=(), label=label, color=color)

    points = []
    for row in result_set.rows:
        raw_value = float(row[1])
        points.append(
            TimeSeriesPoint(
                timestamp=datetime.fromtimestamp(int(row[0]), tz=UTC),
                derived_value=multiplier * raw_value,
                raw_value=raw_value,
            )
        )
    return Series(points=tuple(points), label=label, color=color)


class SeriesCache:
    """Single-entry memo for `transform`, keyed on result-set identity and multiplier."""

    def __init__(self, transformer: Transformer = transform) -> None:
        self._transformer = transformer
        self._result_set: ResultSet | None = None
        self._multiplier: float | None = None
        self._series: Series | None = None

    def get(self, result_set: ResultSet | None, multiplier: float) -> Series:
        if (
            self._series is not None
            and self._result_set is result_set
            and self._multiplier == multiplier
        ):
            return self._series

        series = self._transformer(result_set, multiplier)
        self._result_set = result_set
        self._multiplier = multiplier
        self._series = series
        return series

    def clear(self) -> None:
        self._result_set = None
        self._multiplier = None
        self._series = None

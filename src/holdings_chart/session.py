# This file groups the per-browser-session pipeline state behind one owner.
# Each session holds its own executor (and therefore its own engine), holdings input, and series memo,
# so nothing about a loaded snapshot or a committed amount is shared through module globals.

from __future__ import annotations

from src.holdings_chart.app_config import HoldingsAppConfig
from src.holdings_chart.models import Series
from src.holdings_chart.multiplier_input import MultiplierInput
from src.holdings_chart.query_executor import ExecutorState, SnapshotQueryExecutor
from src.holdings_chart.series_transformer import SeriesCache
from src.holdings_chart.snapshot_loader import snapshot_source


class HoldingsSession:
    def __init__(
        self,
        *,
        config: HoldingsAppConfig,
        executor: SnapshotQueryExecutor | None = None,
    ) -> None:
        self.config = config
        self.executor = executor or SnapshotQueryExecutor()
        self.holdings = MultiplierInput(config.default_multiplier)
        self.series_cache = SeriesCache()

    def ensure_loading(self) -> ExecutorState:
        """Kick off the first snapshot load; later calls leave the executor alone."""

        if self.executor.state is ExecutorState.UNINITIALIZED and not self.executor.closed:
            self.executor.load(snapshot_source(self.config.snapshot_path))
        return self.executor.state

    def current_series(self) -> Series:
        return self.series_cache.get(self.executor.result_set, self.holdings.committed)

    def close(self) -> None:
        self.executor.close()
        self.series_cache.clear()

# This file orchestrates the asynchronous snapshot load and the one-shot price query that follows it.
# It exists so the UI thread never blocks on parsing the snapshot and never queries a half-built engine.
# Loads run on a single worker thread; completions are applied under a lock and tagged with a generation
# so that superseded loads and loads finishing after teardown are dropped and their engines disposed.
# Every load or query failure is logged here and normalized to "no data" for the chart layers.

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from functools import partial

from src.holdings_chart.errors import QueryExecError
from src.holdings_chart.models import ResultSet
from src.holdings_chart.query_engine import QueryEngine, execute_query, load_engine
from src.holdings_chart.snapshot_loader import SnapshotSource

LOGGER = logging.getLogger("holdings_chart")

PRICE_QUERY = "SELECT date, price FROM prices ORDER BY date ASC;"

EngineLoader = Callable[[bytes | None], QueryEngine | None]
QueryRunner = Callable[[QueryEngine, str], ResultSet]


class ExecutorState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    QUERIED = "queried"
    FAILED = "failed"


class SnapshotQueryExecutor:
    """Owns one engine at a time and the single result set computed from it."""

    def __init__(
        self,
        *,
        query: str = PRICE_QUERY,
        engine_loader: EngineLoader = load_engine,
        query_runner: QueryRunner = execute_query,
        pool: ThreadPoolExecutor | None = None,
    ) -> None:
        self._query = query
        self._engine_loader = engine_loader
        self._query_runner = query_runner
        self._owns_pool = pool is None
        self._pool = pool or ThreadPoolExecutor(max_workers=1, thread_name_prefix="snapshot-loader")

        self._lock = threading.Lock()
        self._settled = threading.Condition(self._lock)
        self._generation = 0
        self._state = ExecutorState.UNINITIALIZED
        self._engine: QueryEngine | None = None
        self._result_set: ResultSet | None = None
        self._pending: Future[QueryEngine | None] | None = None
        self._closed = False

    @property
    def query(self) -> str:
        return self._query

    @property
    def state(self) -> ExecutorState:
        with self._lock:
            return self._state

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def engine(self) -> QueryEngine | None:
        with self._lock:
            if self._state in (ExecutorState.READY, ExecutorState.QUERIED):
                return self._engine
            return None

    @property
    def result_set(self) -> ResultSet | None:
        with self._lock:
            if self._state is ExecutorState.QUERIED:
                return self._result_set
            return None

    def load(self, source: SnapshotSource) -> Future[QueryEngine | None]:
        """Start loading a snapshot, discarding whatever engine and result were live."""

        with self._lock:
            if self._closed:
                raise RuntimeError("Cannot load a snapshot into a closed executor")
            self._generation += 1
            generation = self._generation
            self._discard_current()
            if self._pending is not None:
                self._pending.cancel()
            self._state = ExecutorState.LOADING

            future = self._pool.submit(self._build_engine, source)
            self._pending = future
        LOGGER.info("snapshot load started generation=%d", generation)
        future.add_done_callback(partial(self._on_engine_built, generation))
        return future

    def wait(self, timeout: float | None = None) -> ExecutorState:
        """Block until the current load settles or `timeout` elapses; return the state seen."""

        with self._settled:
            self._settled.wait_for(
                lambda: self._closed or self._state is not ExecutorState.LOADING,
                timeout=timeout,
            )
            return self._state

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._generation += 1
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            self._discard_current()
            self._state = ExecutorState.UNINITIALIZED
            self._settled.notify_all()
        if self._owns_pool:
            self._pool.shutdown(wait=False, cancel_futures=True)
        LOGGER.info("snapshot executor closed")

    def __enter__(self) -> SnapshotQueryExecutor:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def _build_engine(self, source: SnapshotSource) -> QueryEngine | None:
        return self._engine_loader(source())

    def _on_engine_built(self, generation: int, future: Future[QueryEngine | None]) -> None:
        if future.cancelled():
            return

        try:
            engine = future.result()
            error: BaseException | None = None
        except Exception as exc:
            engine = None
            error = exc

        with self._lock:
            if self._closed or generation != self._generation:
                if engine is not None:
                    engine.dispose()
                LOGGER.info("discarding stale snapshot load generation=%d", generation)
                return

            self._pending = None
            if error is not None:
                LOGGER.error("snapshot engine construction failed: %s", error, exc_info=error)
                self._state = ExecutorState.FAILED
            elif engine is None:
                LOGGER.warning("snapshot unavailable; no query engine for generation=%d", generation)
                self._state = ExecutorState.FAILED
            else:
                self._engine = engine
                self._state = ExecutorState.READY
                self._result_set = self._run_query(engine)
                self._state = ExecutorState.QUERIED
            self._settled.notify_all()

    def _run_query(self, engine: QueryEngine) -> ResultSet:
        try:
            result_set = self._query_runner(engine, self._query)
        except QueryExecError as exc:
            LOGGER.error("price query failed, using empty result: %s", exc)
            return ResultSet.empty()
        LOGGER.info("price query returned rows=%d", len(result_set))
        return result_set

    def _discard_current(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._result_set = None

# This test file validates the load-then-query state machine behind the chart.
# It exists so a result set is never visible before the engine finishes building, the fixed query runs
# once per engine, and superseded or torn-down loads are discarded with their engines disposed.

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.holdings_chart.errors import QueryExecError
from src.holdings_chart.models import ResultSet
from src.holdings_chart.query_engine import QueryEngine, execute_query, load_engine
from src.holdings_chart.query_executor import ExecutorState, SnapshotQueryExecutor

WAIT_SECONDS = 10


class _CountingRunner:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self, engine: QueryEngine, query: str) -> ResultSet:
        self.calls += 1
        return execute_query(engine, query)


class _RecordingLoader:
    def __init__(self) -> None:
        self.engines: list[QueryEngine] = []

    def __call__(self, snapshot: bytes | None) -> QueryEngine | None:
        engine = load_engine(snapshot)
        if engine is not None:
            self.engines.append(engine)
        return engine


def _gated_source(
    snapshot: bytes | None,
) -> tuple[threading.Event, threading.Event, Callable[[], bytes | None]]:
    started = threading.Event()
    release = threading.Event()

    def source() -> bytes | None:
        started.set()
        release.wait(WAIT_SECONDS)
        return snapshot

    return started, release, source


def test_executor_starts_uninitialized_without_result() -> None:
    with SnapshotQueryExecutor() as executor:
        assert executor.state is ExecutorState.UNINITIALIZED
        assert executor.result_set is None
        assert executor.engine is None


def test_successful_load_reaches_queried_with_rows(scenario_snapshot: bytes) -> None:
    with SnapshotQueryExecutor() as executor:
        executor.load(lambda: scenario_snapshot)

        assert executor.wait(WAIT_SECONDS) is ExecutorState.QUERIED
        assert executor.engine is not None
        result_set = executor.result_set
        assert result_set is not None
        assert result_set.rows == ((1609459200, 29000.0), (1640995200, 47000.0))


def test_no_result_set_is_visible_while_engine_is_loading(scenario_snapshot: bytes) -> None:
    started, release, source = _gated_source(scenario_snapshot)
    with SnapshotQueryExecutor() as executor:
        executor.load(source)
        assert started.wait(WAIT_SECONDS)

        assert executor.state is ExecutorState.LOADING
        assert executor.result_set is None
        assert executor.engine is None

        release.set()
        assert executor.wait(WAIT_SECONDS) is ExecutorState.QUERIED
        assert executor.result_set is not None


def test_query_runs_once_per_engine(scenario_snapshot: bytes) -> None:
    runner = _CountingRunner()
    with SnapshotQueryExecutor(query_runner=runner) as executor:
        executor.load(lambda: scenario_snapshot)
        executor.wait(WAIT_SECONDS)

        first = executor.result_set
        second = executor.result_set

        assert runner.calls == 1
        assert first is second


def test_malformed_snapshot_fails_without_result() -> None:
    with SnapshotQueryExecutor() as executor:
        executor.load(lambda: b"definitely not sqlite" * 32)

        assert executor.wait(WAIT_SECONDS) is ExecutorState.FAILED
        assert executor.engine is None
        assert executor.result_set is None


def test_missing_snapshot_fails_without_result() -> None:
    with SnapshotQueryExecutor() as executor:
        executor.load(lambda: None)

        assert executor.wait(WAIT_SECONDS) is ExecutorState.FAILED
        assert executor.result_set is None


def test_source_error_is_absorbed_as_failure() -> None:
    def broken_source() -> bytes | None:
        raise OSError("disk unavailable")

    with SnapshotQueryExecutor() as executor:
        executor.load(broken_source)

        assert executor.wait(WAIT_SECONDS) is ExecutorState.FAILED


def test_schema_mismatch_yields_empty_result_set(
    scenario_snapshot: bytes, caplog: pytest.LogCaptureFixture
) -> None:
    with SnapshotQueryExecutor(query="SELECT ts, close FROM candles;") as executor:
        executor.load(lambda: scenario_snapshot)

        assert executor.wait(WAIT_SECONDS) is ExecutorState.QUERIED
        assert executor.result_set == ResultSet.empty()
    assert "price query failed" in caplog.text


def test_query_error_from_runner_is_logged_not_raised(scenario_snapshot: bytes) -> None:
    def failing_runner(engine: QueryEngine, query: str) -> ResultSet:
        raise QueryExecError("no such table: prices")

    with SnapshotQueryExecutor(query_runner=failing_runner) as executor:
        executor.load(lambda: scenario_snapshot)

        assert executor.wait(WAIT_SECONDS) is ExecutorState.QUERIED
        assert executor.result_set is not None
        assert executor.result_set.is_empty


def test_new_load_replaces_and_disposes_previous_engine(
    snapshot_factory, scenario_snapshot: bytes
) -> None:
    loader = _RecordingLoader()
    newer_snapshot = snapshot_factory([(1672531200, 16500.0)])
    with SnapshotQueryExecutor(engine_loader=loader) as executor:
        executor.load(lambda: scenario_snapshot)
        executor.wait(WAIT_SECONDS)
        first_result = executor.result_set

        executor.load(lambda: newer_snapshot)
        assert executor.wait(WAIT_SECONDS) is ExecutorState.QUERIED

        assert loader.engines[0].closed
        assert executor.result_set is not first_result
        assert executor.result_set is not None
        assert executor.result_set.rows == ((1672531200, 16500.0),)


def test_superseded_load_is_discarded(snapshot_factory, scenario_snapshot: bytes) -> None:
    loader = _RecordingLoader()
    started, release, slow_source = _gated_source(scenario_snapshot)
    newer_snapshot = snapshot_factory([(1672531200, 16500.0)])
    pool_executor = SnapshotQueryExecutor(engine_loader=loader)
    try:
        slow_future = pool_executor.load(slow_source)
        assert started.wait(WAIT_SECONDS)
        pool_executor.load(lambda: newer_snapshot)
        release.set()

        slow_future.result(WAIT_SECONDS)
        assert pool_executor.wait(WAIT_SECONDS) is ExecutorState.QUERIED

        result_set = pool_executor.result_set
        assert result_set is not None
        assert result_set.rows == ((1672531200, 16500.0),)
        assert loader.engines[0].closed
        assert not loader.engines[1].closed
    finally:
        pool_executor.close()


def test_close_while_loading_drops_completion(scenario_snapshot: bytes) -> None:
    loader = _RecordingLoader()
    started, release, source = _gated_source(scenario_snapshot)
    pool = ThreadPoolExecutor(max_workers=1)
    executor = SnapshotQueryExecutor(engine_loader=loader, pool=pool)

    executor.load(source)
    assert started.wait(WAIT_SECONDS)
    executor.close()
    release.set()
    pool.shutdown(wait=True)

    assert executor.closed
    assert executor.state is ExecutorState.UNINITIALIZED
    assert executor.result_set is None
    assert executor.engine is None
    assert len(loader.engines) == 1
    assert loader.engines[0].closed


def test_load_after_close_is_rejected(scenario_snapshot: bytes) -> None:
    executor = SnapshotQueryExecutor()
    executor.close()

    with pytest.raises(RuntimeError):
        executor.load(lambda: scenario_snapshot)

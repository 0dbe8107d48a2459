# This test file checks that snapshot bytes become a read-only engine that answers the price query.
# It also pins the failure taxonomy: no bytes means no engine, garbage bytes raise EngineInitError,
# and schema mismatches or writes raise QueryExecError instead of leaking SQLAlchemy errors.

from __future__ import annotations

import pytest

from src.holdings_chart.errors import EngineInitError, QueryExecError
from src.holdings_chart.query_engine import QueryEngine, execute_query, load_engine
from src.holdings_chart.query_executor import PRICE_QUERY


@pytest.mark.parametrize("snapshot", [None, b""])
def test_missing_snapshot_yields_no_engine(snapshot: bytes | None) -> None:
    assert load_engine(snapshot) is None


def test_malformed_snapshot_raises_engine_init_error() -> None:
    with pytest.raises(EngineInitError):
        load_engine(b"this is not a sqlite database" * 64)


def test_price_query_returns_columns_and_rows_in_order(scenario_snapshot: bytes) -> None:
    engine = load_engine(scenario_snapshot)
    assert isinstance(engine, QueryEngine)

    result_set = execute_query(engine, PRICE_QUERY)

    assert result_set.columns == ("date", "price")
    assert result_set.rows == ((1609459200, 29000.0), (1640995200, 47000.0))
    engine.dispose()


def test_schema_mismatch_raises_query_exec_error(scenario_snapshot: bytes) -> None:
    with load_engine(scenario_snapshot) as engine:
        with pytest.raises(QueryExecError):
            engine.execute("SELECT ts, close FROM candles;")


def test_engine_rejects_writes(scenario_snapshot: bytes) -> None:
    with load_engine(scenario_snapshot) as engine:
        with pytest.raises(QueryExecError):
            engine.execute("INSERT INTO prices (date, price) VALUES (1672531200, 16500.0)")

        assert len(engine.execute(PRICE_QUERY)) == 2


def test_disposed_engine_refuses_queries(scenario_snapshot: bytes) -> None:
    engine = load_engine(scenario_snapshot)
    assert engine is not None
    engine.dispose()
    engine.dispose()

    assert engine.closed
    with pytest.raises(QueryExecError):
        engine.execute(PRICE_QUERY)


def test_engines_from_same_bytes_are_independent(scenario_snapshot: bytes) -> None:
    first = load_engine(scenario_snapshot)
    second = load_engine(scenario_snapshot)
    assert first is not None and second is not None

    first.dispose()

    assert len(second.execute(PRICE_QUERY)) == 2
    second.dispose()

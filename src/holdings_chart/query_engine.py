# This file binds a snapshot byte buffer to an in-process, read-only SQL engine.
# It exists so the executor can run the fixed price query without touching the filesystem again.
# The snapshot is deserialized into a private in-memory SQLite connection and wrapped in SQLAlchemy.
# Disposing the engine closes that connection and releases its memory; replaced engines must be disposed.

from __future__ import annotations

import logging
import sqlite3

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from src.holdings_chart.errors import EngineInitError, QueryExecError
from src.holdings_chart.models import ResultSet

LOGGER = logging.getLogger("holdings_chart")

_PROBE_QUERY = "SELECT count(*) FROM sqlite_master"


class QueryEngine:
    """One loaded snapshot exposed through a single-connection SQLAlchemy engine."""

    def __init__(self, *, engine: Engine, snapshot_size: int) -> None:
        self._engine = engine
        self._snapshot_size = snapshot_size
        self._closed = False

    @property
    def snapshot_size(self) -> int:
        return self._snapshot_size

    @property
    def closed(self) -> bool:
        return self._closed

    def execute(self, query: str) -> ResultSet:
        if self._closed:
            raise QueryExecError("Query engine has been disposed")
        try:
            with self._engine.connect() as connection:
                result = connection.execute(text(query))
                columns = tuple(str(key) for key in result.keys())
                rows = tuple(tuple(row) for row in result.all())
        except SQLAlchemyError as exc:
            raise QueryExecError(f"Query failed against snapshot: {exc}") from exc
        return ResultSet(columns=columns, rows=rows)

    def dispose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._engine.dispose()
        LOGGER.debug("query engine disposed snapshot_bytes=%d", self._snapshot_size)

    def __enter__(self) -> QueryEngine:
        return self

    def __exit__(self, *_: object) -> None:
        self.dispose()


def _open_snapshot_connection(snapshot: bytes) -> sqlite3.Connection:
    connection = sqlite3.connect(":memory:", check_same_thread=False)
    try:
        connection.deserialize(snapshot)
        # SQLite parses the header lazily; the probe forces it.
        connection.execute(_PROBE_QUERY).fetchone()
        connection.execute("PRAGMA query_only = ON")
    except (sqlite3.Error, ValueError, OverflowError) as exc:
        connection.close()
        raise EngineInitError(f"Snapshot bytes are not a readable database: {exc}") from exc
    return connection


def load_engine(snapshot: bytes | None) -> QueryEngine | None:
    """Build a read-only engine from snapshot bytes; None or empty bytes yield no engine."""

    if not snapshot:
        LOGGER.info("no snapshot bytes supplied; query engine not created")
        return None

    connection = _open_snapshot_connection(bytes(snapshot))
    engine = create_engine(
        "sqlite://",
        creator=lambda: connection,
        poolclass=StaticPool,
        future=True,
    )
    LOGGER.info("query engine ready snapshot_bytes=%d", len(snapshot))
    return QueryEngine(engine=engine, snapshot_size=len(snapshot))


def execute_query(engine: QueryEngine, query: str) -> ResultSet:
    return engine.execute(query)

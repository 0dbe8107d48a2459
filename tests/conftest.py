"""
Shared test configuration.
It puts the repository root on `sys.path`, pins environment defaults, and builds snapshot fixtures.
These tests are executed by `pytest` locally and in CI and should remain deterministic.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Sequence
from pathlib import Path

import pandas as pd
import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.holdings_chart.snapshot_loader import write_price_snapshot  # noqa: E402

SCENARIO_ROWS: list[tuple[int, float]] = [(1609459200, 29000.0), (1640995200, 47000.0)]


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure environment variables read by settings are present during tests."""

    defaults = {
        "PROJECT_NAME": "test-project",
        "ENV": "test",
        "LOG_LEVEL": "INFO",
    }

    for key, value in defaults.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)


@pytest.fixture
def snapshot_factory(tmp_path: Path) -> Callable[[Sequence[tuple[int, float]]], bytes]:
    """Write `(epoch_seconds, price)` rows into a real snapshot file and return its bytes."""

    counter = {"n": 0}

    def build(rows: Sequence[tuple[int, float]]) -> bytes:
        counter["n"] += 1
        path = tmp_path / f"snapshot_{counter['n']}.sqlite3"
        frame = pd.DataFrame(list(rows), columns=["date", "price"])
        write_price_snapshot(path, frame)
        return path.read_bytes()

    return build


@pytest.fixture
def scenario_snapshot(snapshot_factory: Callable[[Sequence[tuple[int, float]]], bytes]) -> bytes:
    return snapshot_factory(SCENARIO_ROWS)

#!/usr/bin/env python3
"""
Build the read-only SQLite price snapshot the dashboard charts from.
It converts a `date,price` CSV (ISO dates or epoch seconds) into the `prices` table, sorted by date.
Run it before starting the app, and expect it to print a summary and exit non-zero on failure.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.common.logging import configure_logging
from src.holdings_chart.snapshot_loader import read_price_csv, write_price_snapshot


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build the Bitcoin price snapshot for the dashboard")
    parser.add_argument("--csv", required=True, help="Input CSV with `date` and `price` columns")
    parser.add_argument(
        "--output",
        default="data.sqlite3",
        help="Snapshot file to write (replaced if it exists)",
    )
    return parser.parse_args()


def main() -> None:
    configure_logging()
    args = parse_args()
    prices = read_price_csv(args.csv)
    rows_written = write_price_snapshot(args.output, prices)
    print(json.dumps({"output": args.output, "rows_written": rows_written}, indent=2))


if __name__ == "__main__":
    main()

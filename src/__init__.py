"""
Package marker for source code under `src`.
It keeps `src.common` and `src.holdings_chart` importable under one stable path from the app, scripts, and tests.
"""

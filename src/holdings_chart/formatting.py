# This file collects small formatting helpers for chart tooltips and captions.
# It exists so currency and date text is produced once in Python and shown verbatim by the chart.
# The functions intentionally return simple strings that Altair and Streamlit can display directly.

from __future__ import annotations

from datetime import datetime


def format_usd(value: float | int | None) -> str:
    if value is None:
        return "-"
    amount = float(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%m/%d/%Y")


def format_btc(value: float | int | None) -> str:
    if value is None:
        return "-"
    return f"{float(value):,.8f} BTC"

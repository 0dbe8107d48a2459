# This file defines help text for the holdings input and the chart.
# A single dictionary keeps explanations consistent between the page and tests.

from __future__ import annotations

TOOLTIPS: dict[str, str] = {
    "holdings_input": "Amount of BTC you hold. It is rounded to 8 decimal places (one satoshi) when you generate the chart.",
    "holdings_chart": "Value of your holdings on each day, on a logarithmic scale. Hover to see the date, your holdings value, and the Bitcoin price.",
    "log_scale": "Each gridline step multiplies the value, so equal vertical distances mean equal percentage changes.",
}

# This file stores copy for the page title, the holdings input, and empty or failed data states.
# Centralizing text keeps wording reviews away from rendering logic.

from __future__ import annotations

APP_TITLE = "Bitcoin holdings value visualizer"
APP_HEADING = "Visualize your Bitcoin holdings value over time"
APP_SUBTITLE = "Visualize your Bitcoin holdings value over time."

HOLDINGS_INPUT_LABEL = "Holdings amount"
HOLDINGS_INPUT_PLACEHOLDER = "0.00000000 BTC"
GENERATE_BUTTON_LABEL = "Generate chart"

LOADING_SNAPSHOT = "Loading price history..."
SNAPSHOT_FAILED = "Price history could not be loaded; the chart is shown without data."
HOLDINGS_CAPTION = "Showing the value of {amount} over time."

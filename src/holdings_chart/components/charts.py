# This file renders the holdings series as an interactive Altair line chart inside Streamlit.
# It exists so axis scaling, hover behavior, and tooltip formatting live in one testable place.
# The value axis is logarithmic and the time axis ticks once per year; hovering snaps to the nearest
# date and shows both the holdings value and the underlying Bitcoin price.
# The Streamlit element key follows the holdings amount so every change redraws the chart from scratch.

from __future__ import annotations

import altair as alt
import pandas as pd
import streamlit as st

from src.holdings_chart.formatting import format_date, format_usd
from src.holdings_chart.models import Series

GRID_COLOR = "#222531"
TICK_COLOR = "#858ca2"
PRICE_TOOLTIP_TITLE = "Bitcoin price"

FRAME_COLUMNS = [
    "timestamp",
    "holdings_value",
    "price",
    "date_label",
    "holdings_label",
    "price_label",
]


def series_to_frame(series: Series) -> pd.DataFrame:
    if series.is_empty:
        frame = pd.DataFrame(columns=FRAME_COLUMNS)
        frame["timestamp"] = pd.to_datetime(frame["timestamp"], utc=True)
        return frame.astype({"holdings_value": "float64", "price": "float64"})

    return pd.DataFrame(
        {
            "timestamp": pd.to_datetime([point.timestamp for point in series.points], utc=True),
            "holdings_value": [point.derived_value for point in series.points],
            "price": [point.raw_value for point in series.points],
            "date_label": [format_date(point.timestamp) for point in series.points],
            "holdings_label": [format_usd(point.derived_value) for point in series.points],
            "price_label": [format_usd(point.raw_value) for point in series.points],
        },
        columns=FRAME_COLUMNS,
    )


def build_holdings_chart(series: Series, *, height: int = 520) -> alt.LayerChart:
    frame = series_to_frame(series)

    base = alt.Chart(frame).encode(
        x=alt.X(
            "timestamp:T",
            title=None,
            axis=alt.Axis(
                format="%Y",
                tickCount="year",
                gridColor=GRID_COLOR,
                labelColor=TICK_COLOR,
            ),
        )
    )
    nearest = alt.selection_point(
        name="nearest_date",
        nearest=True,
        on="mouseover",
        encodings=["x"],
        empty=False,
        clear="mouseout",
    )

    line = base.mark_line(point=False, color=series.color).encode(
        y=alt.Y(
            "holdings_value:Q",
            title=series.label,
            scale=alt.Scale(type="log"),
            axis=alt.Axis(gridColor=GRID_COLOR, labelColor=TICK_COLOR),
        ),
    )
    # The hover tooltip lives on the layer that owns the nearest-x selection, so it follows the cursor
    # to the closest date instead of needing a hit on the one-pixel rule.
    selectors = (
        base.mark_point(size=0)
        .encode(
            y=alt.Y("holdings_value:Q"),
            opacity=alt.value(0),
            tooltip=[
                alt.Tooltip("date_label:N", title="Date"),
                alt.Tooltip("holdings_label:N", title=series.label),
                alt.Tooltip("price_label:N", title=PRICE_TOOLTIP_TITLE),
            ],
        )
        .add_params(nearest)
    )
    rule = base.mark_rule(color=TICK_COLOR).encode(
        opacity=alt.condition(nearest, alt.value(0.6), alt.value(0)),
    )

    return (
        alt.layer(line, selectors, rule)
        .properties(height=height, width="container")
        .configure_legend(disable=True)
        .configure_view(strokeWidth=0)
    )


def chart_key(multiplier: float) -> str:
    """Widget key for the chart; a new amount gives a new key so the chart remounts."""

    return f"holdings-chart-{float(multiplier)!r}"


def render_holdings_chart(
    series: Series,
    *,
    multiplier: float,
    help_text: str,
    height: int = 520,
) -> None:
    st.subheader(series.label, help=help_text)
    if series.is_empty:
        st.info("No price history is available to chart.")

    chart = build_holdings_chart(series, height=height)
    st.altair_chart(chart, use_container_width=True, key=chart_key(multiplier))

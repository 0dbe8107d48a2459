# This file is the Streamlit entrypoint for the Bitcoin holdings value visualizer.
# It exists to wire the session-owned snapshot pipeline, the holdings input, and the chart into one page.
# Every browser session gets its own HoldingsSession in st.session_state; the session's executor is
# closed when Streamlit drops that state, so a load still in flight is discarded instead of applied.
# The page never blocks on the snapshot: while it loads, a polling fragment stands in for the chart and
# triggers a full rerun once the executor settles.

from __future__ import annotations

import weakref

import streamlit as st

from src.common.logging import configure_logging
from src.holdings_chart.app_config import HoldingsAppConfig, load_app_config
from src.holdings_chart.components.charts import render_holdings_chart
from src.holdings_chart.components.holdings_input import render_holdings_input
from src.holdings_chart.formatting import format_btc
from src.holdings_chart.query_executor import ExecutorState
from src.holdings_chart.session import HoldingsSession
from src.holdings_chart.tooltips import TOOLTIPS
from src.holdings_chart.ui_text import (
    APP_HEADING,
    APP_SUBTITLE,
    APP_TITLE,
    HOLDINGS_CAPTION,
    LOADING_SNAPSHOT,
    SNAPSHOT_FAILED,
)

SESSION_STATE_KEY = "holdings_session"


def get_session(config: HoldingsAppConfig) -> HoldingsSession:
    session = st.session_state.get(SESSION_STATE_KEY)
    if session is None:
        session = HoldingsSession(config=config)
        weakref.finalize(session, session.executor.close)
        st.session_state[SESSION_STATE_KEY] = session
    return session


def await_snapshot(session: HoldingsSession) -> None:
    if session.executor.state is not ExecutorState.LOADING:
        st.rerun()
    st.info(LOADING_SNAPSHOT)


def main() -> None:
    configure_logging()
    st.set_page_config(page_title=APP_TITLE, layout="wide")

    config = load_app_config()
    session = get_session(config)
    state = session.ensure_loading()

    st.title(APP_HEADING)
    st.caption(APP_SUBTITLE)

    render_holdings_input(session.holdings, help_text=TOOLTIPS["holdings_input"])
    st.caption(HOLDINGS_CAPTION.format(amount=format_btc(session.holdings.committed)))

    if state is ExecutorState.LOADING:
        st.fragment(await_snapshot, run_every=config.snapshot_poll_seconds)(session)
        return
    if state is ExecutorState.FAILED:
        st.warning(SNAPSHOT_FAILED)

    render_holdings_chart(
        session.current_series(),
        multiplier=session.holdings.committed,
        help_text=f"{TOOLTIPS['holdings_chart']} {TOOLTIPS['log_scale']}",
        height=config.chart_height,
    )


if __name__ == "__main__":
    main()

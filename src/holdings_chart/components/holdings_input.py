# This file renders the holdings amount text box and the "Generate chart" button.
# Typing only updates the pending text; the committed amount changes when the button is pressed.
# The button stays disabled while the text is empty or already matches the committed amount.

from __future__ import annotations

import streamlit as st

from src.holdings_chart.multiplier_input import MultiplierInput
from src.holdings_chart.ui_text import (
    GENERATE_BUTTON_LABEL,
    HOLDINGS_INPUT_LABEL,
    HOLDINGS_INPUT_PLACEHOLDER,
)

INPUT_STATE_KEY = "holdings_input_text"


def render_holdings_input(holdings: MultiplierInput, *, help_text: str) -> bool:
    """Render the input row and return True when a new amount was committed on this run."""

    if INPUT_STATE_KEY not in st.session_state:
        st.session_state[INPUT_STATE_KEY] = holdings.pending_text

    input_col, button_col = st.columns([4, 1], vertical_alignment="bottom")
    holdings.pending_text = input_col.text_input(
        HOLDINGS_INPUT_LABEL,
        key=INPUT_STATE_KEY,
        placeholder=HOLDINGS_INPUT_PLACEHOLDER,
        help=help_text,
    )
    clicked = button_col.button(
        GENERATE_BUTTON_LABEL,
        disabled=not holdings.can_confirm,
        use_container_width=True,
    )
    return clicked and holdings.confirm()

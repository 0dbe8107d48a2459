# This package groups the Streamlit components used by the holdings page.

__all__ = ["charts", "holdings_input"]

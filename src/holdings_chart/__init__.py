# This package contains the Bitcoin holdings value visualizer.
# Modules separate snapshot loading, query execution, series derivation, and chart rendering so each
# stage can be tested without Streamlit running.

__all__ = ["app"]

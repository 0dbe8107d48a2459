"""
Shared settings and logging helpers for the holdings chart application.
"""

"""
Logging configuration helpers.
The snapshot pipeline logs through the `holdings_chart` logger; this module gives it the configured level
and one pipe-separated format, and keeps SQLAlchemy's statement echo out of debug output.
Call `configure_logging` from the page entrypoint; Streamlit reruns the script, so repeat calls are no-ops.
"""

from __future__ import annotations

import logging

from src.common.settings import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PIPELINE_LOGGER = "holdings_chart"
QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")

_LOGGING_CONFIGURED = False


def configure_logging() -> logging.Logger:
    """Apply LOG_LEVEL to the pipeline logger and return it."""

    global _LOGGING_CONFIGURED
    pipeline_logger = logging.getLogger(PIPELINE_LOGGER)
    if _LOGGING_CONFIGURED:
        return pipeline_logger

    level = logging.getLevelName(get_settings().LOG_LEVEL)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    pipeline_logger.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    _LOGGING_CONFIGURED = True
    return pipeline_logger

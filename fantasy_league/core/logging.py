"""Logging setup shared by the API process and the scripts."""

import logging

from fantasy_league.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def configure_logging(level: str | None = None) -> None:
    """Attach a single stream handler to the package logger (idempotent)."""
    global _configured
    if _configured:
        return

    logger = logging.getLogger("fantasy_league")
    logger.setLevel(level or get_settings().log_level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    _configured = True

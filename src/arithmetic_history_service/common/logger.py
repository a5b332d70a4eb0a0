"""Shared logger for the arithmetic history service."""
import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("arithmetic_history_service")

if not logger.handlers:
    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(_handler)
    logger.setLevel(os.getenv("CALC_LOG_LEVEL", "INFO").upper())


def set_level(level: str) -> None:
    """
    Change the level of the service logger.

    :param str level: Standard logging level name (e.g. "DEBUG", "INFO")
    """
    logger.setLevel(level.upper())

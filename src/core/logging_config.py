"""Logging configuration.

This module configures the root logger from the LOG_LEVEL setting.
"""

import logging

from config import LOG_FORMAT, LOG_LEVEL


def setup_logging() -> None:
    """Configure root logging for the API process."""
    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # SQL statement logging is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("Logging configured - Level: %s", LOG_LEVEL)

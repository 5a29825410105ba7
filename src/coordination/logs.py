"""Logging setup.

Lock modules log through the stdlib ``logging`` tree, so nothing is printed
until the application configures logging.
"""

import logging

import structlog

from src.coordination.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the package's stdlib loggers to the configured level."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {settings.log_level}")

    logging.basicConfig(format="%(message)s")
    logging.getLogger("src.coordination").setLevel(level)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=False,
    )

"""Logging configuration for the service."""

import logging
import sys

from app.core.config import Settings, settings as default_settings


def setup_logging(settings: Settings = default_settings) -> None:
    """Configure process-wide logging.

    Level is DEBUG when settings.debug is True, otherwise settings.log_level.
    Output goes to stdout so the container runtime picks it up.
    """
    level = logging.DEBUG if settings.debug else logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

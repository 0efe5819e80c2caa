"""Logging helpers for hosts embedding the preview."""

import logging
from typing import Optional, Union

from bibpreview.protocols import get_preview_config

logger = logging.getLogger(__name__)

ROOT_LOGGER_NAME = "bibpreview"


def configure_logging(level: Optional[Union[str, int]] = None) -> logging.Logger:
    """
    Apply a log level to the package logger.

    Args:
        level: Level name or number; defaults to PreviewConfig.log_level

    Returns:
        The "bibpreview" logger. No handlers are installed; the host owns them.
    """
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if level is None:
        level = get_preview_config().log_level
    if level is None:
        return package_logger

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    package_logger.setLevel(level)
    logger.debug(f"bibpreview log level set to {logging.getLevelName(level)}")
    return package_logger

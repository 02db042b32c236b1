"""Core logging implementation for scaffold-audit."""

import logging
import sys
from typing import Optional

__all__ = ["get_logger", "setup_logging", "DEFAULT_LOGGER_NAME"]

DEFAULT_LOGGER_NAME = "scaffold-audit"


def setup_logging(level: int | str = logging.INFO, stream=sys.stderr) -> None:
    """Configure basic logging.

    Args:
        level: Logging level, either numeric or a level name such as "DEBUG".
        stream: Output stream.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Engine modules pass a short component name ("layout", "keyboard"),
    which is nested under the project logger.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    if name is None:
        return logging.getLogger(DEFAULT_LOGGER_NAME)
    if name.startswith(DEFAULT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{DEFAULT_LOGGER_NAME}.{name}")

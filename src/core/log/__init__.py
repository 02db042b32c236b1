"""Logging micro API for scaffold-audit."""

from .lib import DEFAULT_LOGGER_NAME, get_logger, setup_logging

__all__ = ["get_logger", "setup_logging", "DEFAULT_LOGGER_NAME"]

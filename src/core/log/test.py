"""Tests for core logging module."""

import logging
from io import StringIO

import pytest

from .lib import DEFAULT_LOGGER_NAME, get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    @pytest.mark.unit
    def test_get_logger_nests_component(self) -> None:
        """Component loggers live under the project logger."""
        logger = get_logger("layout")
        assert logger.name == "scaffold-audit.layout"
        assert isinstance(logger, logging.Logger)

    @pytest.mark.unit
    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == DEFAULT_LOGGER_NAME == "scaffold-audit"

    @pytest.mark.unit
    def test_get_logger_keeps_qualified_name(self) -> None:
        """Already qualified names are not prefixed twice."""
        logger = get_logger("scaffold-audit.cli")
        assert logger.name == "scaffold-audit.cli"

    @pytest.mark.unit
    def test_setup_logging_accepts_level_name(self) -> None:
        """String level names are accepted."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        logger = get_logger("test_setup")
        logger.debug("test message")

        # basicConfig is a no-op when logging was already configured,
        # so only the API contract is checked.
        assert logger.level == logging.NOTSET

"""
Tests for logging configuration.
"""

import json
import logging

import pytest

from pycggtts.utils.logging import LOG_FILE_NAME, PACKAGE_LOGGER, get_logger, setup_logging


@pytest.fixture
def package_logger():
    """Package logger, reset to console only after the test."""
    yield logging.getLogger(PACKAGE_LOGGER)
    setup_logging(log_to_file=False)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_json_file(self, tmp_path, package_logger):
        """Records are written as JSON lines in the log directory."""
        setup_logging(level="DEBUG", log_dir=tmp_path, log_to_console=False, json_format=True)
        get_logger("pycggtts.tests.json_file").info("Read CGGTTS file", tracks=4)
        for handler in package_logger.handlers:
            handler.flush()

        record = json.loads((tmp_path / LOG_FILE_NAME).read_text().splitlines()[-1])
        assert record["event"] == "Read CGGTTS file"
        assert record["tracks"] == 4
        assert record["level"] == "info"
        assert record["logger"] == "pycggtts.tests.json_file"

    def test_level_filters(self, tmp_path, package_logger):
        """Records below the configured level are dropped."""
        setup_logging(level="WARNING", log_dir=tmp_path, log_to_console=False, json_format=True)
        logger = get_logger("pycggtts.tests.level_filters")
        logger.info("dropped")
        logger.warning("kept")
        for handler in package_logger.handlers:
            handler.flush()

        events = [
            json.loads(line)["event"]
            for line in (tmp_path / LOG_FILE_NAME).read_text().splitlines()
        ]
        assert events == ["kept"]

    def test_handlers_replaced(self, tmp_path, package_logger):
        """A second call does not stack handlers."""
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path)
        assert len(package_logger.handlers) == 2
        assert not package_logger.propagate

    def test_unknown_level(self, package_logger):
        """Unknown level names fall back to INFO."""
        setup_logging(level="chatty", log_to_file=False)
        assert package_logger.level == logging.INFO

    def test_no_file_without_directory(self, package_logger):
        """log_to_file needs a directory."""
        setup_logging(log_to_file=True, log_dir=None)
        assert [type(h) for h in package_logger.handlers] == [logging.StreamHandler]

"""
Tests for logging setup.
"""
import json
import logging
import sys

import pytest

from quicklink_app.logging_config import LOGGER_NAME, JsonFormatter, setup_logging


@pytest.fixture
def json_log_file(tmp_path):
    log_file = tmp_path / "quicklink.log"
    logger = setup_logging("INFO", log_file=str(log_file), json_format=True)
    yield logger, log_file

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestJsonLogging:
    """Test JSON log lines"""

    def test_message_with_quotes_and_newline(self, json_log_file):
        logger, log_file = json_log_file

        logger.warning('Validation failed: [{"field": "url"}]\nsecond line')

        lines = log_file.read_text().splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["level"] == "WARNING"
        assert entry["logger"] == LOGGER_NAME
        assert entry["message"] == 'Validation failed: [{"field": "url"}]\nsecond line'

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.getLogger(LOGGER_NAME).makeRecord(
                LOGGER_NAME, logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )

        entry = json.loads(JsonFormatter().format(record))

        assert entry["message"] == "failed"
        assert "RuntimeError: boom" in entry["exception"]

    def test_plain_format_by_default(self):
        logger = setup_logging("DEBUG")

        assert logger.level == logging.DEBUG
        assert not isinstance(logger.handlers[0].formatter, JsonFormatter)

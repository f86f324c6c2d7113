"""Tests for logging setup."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from meeting_bot.config.logger import ColoredFormatter, get_logger, setup_logging


@pytest.fixture
def restore_logging():
    yield
    setup_logging(enable_file_logging=False)


class TestLogging:

    def test_colored_formatter_restores_levelname(self):
        record = logging.LogRecord("meeting_bot.test", logging.WARNING, __file__, 1, "relay slow", None, None)

        output = ColoredFormatter(fmt="%(levelname)s %(message)s").format(record)

        assert "\033[33m" in output
        assert record.levelname == "WARNING"

    def test_console_only_when_file_logging_disabled(self, restore_logging):
        logger = setup_logging(log_level="INFO", enable_file_logging=False)

        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0], RotatingFileHandler)

    def test_file_handler_added(self, tmp_path, restore_logging):
        log_file = tmp_path / "bot.log"
        logger = setup_logging(log_level="DEBUG", log_file=str(log_file), enable_file_logging=True)

        get_logger("test").debug("joined 123456789")
        for handler in logger.handlers:
            handler.flush()

        assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
        assert "joined 123456789" in log_file.read_text()

    def test_relay_http_logs_quieted(self, restore_logging):
        setup_logging(log_level="DEBUG", enable_file_logging=False)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert get_logger("audio_relay").name == "meeting_bot.audio_relay"

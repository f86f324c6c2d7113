"""
Logging for the Meeting Bot: colored console output, optional rotating log
file (LOG_TO_FILE), and child loggers under "meeting_bot".
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from datetime import datetime
from typing import Optional

from .settings import settings


CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# httpx logs every relay POST at INFO
NOISY_LOGGERS = {
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "apscheduler": logging.WARNING,
}


class ColoredFormatter(logging.Formatter):
    """Colors the level name on console output."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        levelname = record.levelname
        color = self.COLORS.get(levelname)
        if color:
            record.levelname = f"{color}{levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            # the file handler formats the same record
            record.levelname = levelname


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(level: int, log_file: Optional[str]) -> logging.Handler:
    if log_file is None:
        log_dir = Path("logs")
        log_dir.mkdir(exist_ok=True)
        log_file = str(log_dir / f"meeting_bot_{datetime.now().strftime('%Y%m%d')}.log")
    handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[str] = None,
    enable_file_logging: Optional[bool] = None
) -> logging.Logger:
    """
    Configure the "meeting_bot" logger. Arguments override LOG_LEVEL and
    LOG_TO_FILE; calling again replaces the previous handlers.
    """
    level = getattr(logging, (log_level or settings.log_level).upper())
    if enable_file_logging is None:
        enable_file_logging = settings.log_to_file

    logger = logging.getLogger("meeting_bot")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_console_handler(level))
    if enable_file_logging:
        logger.addHandler(_file_handler(level, log_file))

    for name, noisy_level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(max(noisy_level, level))

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger "meeting_bot.<name>"."""
    return logging.getLogger(f"meeting_bot.{name}")


logger = setup_logging()

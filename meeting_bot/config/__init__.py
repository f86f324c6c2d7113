"""
Configuration module for the Meeting Bot.
"""

from .settings import (
    Settings,
    settings,
    MeetingPlatform,
    TranscriptionSettings,
    RelaySettings,
    BrowserSettings,
    BotSettings,
    SchedulerSettings,
    ApiSettings,
)
from .logger import logger, get_logger, setup_logging

__all__ = [
    "Settings",
    "settings",
    "MeetingPlatform",
    "TranscriptionSettings",
    "RelaySettings",
    "BrowserSettings",
    "BotSettings",
    "SchedulerSettings",
    "ApiSettings",
    "logger",
    "get_logger",
    "setup_logging",
]

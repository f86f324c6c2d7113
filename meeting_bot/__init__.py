"""
Meeting Bot Package.
Joins Zoom, Google Meet and Teams meetings and relays their audio to a
transcription service.
"""

from .config import settings, logger, get_logger
from .models import (
    MeetingSession,
    SessionStatus,
    SessionSummary,
    ScheduledJoin,
    JoinResult,
    LeaveResult,
)
from .config.settings import MeetingPlatform

__version__ = "1.0.0"

__all__ = [
    # Models
    "MeetingSession",
    "SessionStatus",
    "SessionSummary",
    "ScheduledJoin",
    "JoinResult",
    "LeaveResult",
    "MeetingPlatform",

    # Config
    "settings",
    "logger",
    "get_logger",
]

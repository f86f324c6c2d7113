"""
Meeting handler module: browser driver, platform strategies and orchestrator.
"""

from .browser_driver import BrowserSessionDriver, DriverHandle
from .base import JoinStep, PlatformStrategy
from .zoom_meeting_handler import ZoomMeetingHandler
from .meet_handler import MeetMeetingHandler
from .teams_meeting_handler import TeamsMeetingHandler
from .meeting_orchestrator import MeetingOrchestrator, STRATEGY_CLASSES

__all__ = [
    "BrowserSessionDriver",
    "DriverHandle",
    "JoinStep",
    "PlatformStrategy",
    "ZoomMeetingHandler",
    "MeetMeetingHandler",
    "TeamsMeetingHandler",
    "MeetingOrchestrator",
    "STRATEGY_CLASSES",
]

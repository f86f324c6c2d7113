"""
Core module exports.
"""

from .exceptions import (
    MeetingBotException,
    UnsupportedPlatformError,
    DuplicateSessionError,
    SessionNotFoundError,
    JoinError,
    JoinStepTimeoutError,
    JoinStepFailure,
    JoinAbortedError,
    DriverError,
    DriverTimeoutError,
    DriverCrashError,
    RelayDeliveryFailure,
    SchedulerError,
)

__all__ = [
    "MeetingBotException",
    "UnsupportedPlatformError",
    "DuplicateSessionError",
    "SessionNotFoundError",
    "JoinError",
    "JoinStepTimeoutError",
    "JoinStepFailure",
    "JoinAbortedError",
    "DriverError",
    "DriverTimeoutError",
    "DriverCrashError",
    "RelayDeliveryFailure",
    "SchedulerError",
]

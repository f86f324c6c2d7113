"""
Custom exceptions for the Meeting Bot.
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status


class MeetingBotException(Exception):
    """Base exception for Meeting Bot errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Error class name, used as a machine-readable code in outcomes."""
        return type(self).__name__


# Validation errors: raised before any side effect

class UnsupportedPlatformError(MeetingBotException):
    """Raised when a join names a platform that is unknown or disabled."""

    def __init__(self, platform: str):
        super().__init__(f"Unsupported platform: {platform}", {"platform": platform})


class DuplicateSessionError(MeetingBotException):
    """Raised when a session already exists for the meeting identifier."""

    def __init__(self, meeting_id: str):
        super().__init__(
            f"A session already exists for meeting {meeting_id}",
            {"meeting_id": meeting_id},
        )


class SessionNotFoundError(MeetingBotException):
    """Raised when no session exists for the meeting identifier."""

    def __init__(self, meeting_id: str):
        super().__init__(f"Meeting not found: {meeting_id}", {"meeting_id": meeting_id})


# Join errors

class JoinError(MeetingBotException):
    """Raised when a platform join sequence aborts."""

    def __init__(self, step: str, cause: str):
        self.step = step
        self.cause = cause
        super().__init__(f"Join step '{step}' failed: {cause}", {"step": step, "cause": cause})


class JoinStepTimeoutError(JoinError):
    """A selector or navigation step exceeded its bound."""


class JoinStepFailure(JoinError):
    """The platform rejected entry or the page was in an unexpected state."""


class JoinAbortedError(JoinError):
    """The session was left before the join sequence finished."""


# Driver errors

class DriverError(MeetingBotException):
    """Raised when a browser driver operation fails."""


class DriverTimeoutError(DriverError):
    """A driver wait did not complete within its timeout."""


class DriverCrashError(DriverError):
    """The browser process or page died unexpectedly."""


class RelayDeliveryFailure(MeetingBotException):
    """Raised when forwarding an audio chunk fails."""


class SchedulerError(MeetingBotException):
    """Raised when scheduling operations fail."""


# HTTP Exceptions for API responses
class HTTPBadRequest(HTTPException):
    """400 Bad Request"""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class HTTPNotFound(HTTPException):
    """404 Not Found"""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class HTTPConflict(HTTPException):
    """409 Conflict"""
    def __init__(self, detail: str = "Resource conflict"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class HTTPInternalServerError(HTTPException):
    """500 Internal Server Error"""
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

"""
API request/response schemas for meeting operations.
"""

from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime


class JoinRequest(BaseModel):
    """Request to join a meeting now."""
    platform: str = Field(..., description="zoom, meet/google, teams/microsoft", min_length=1)
    meeting_url: str = Field(..., description="Meeting URL to join", min_length=10)
    password: Optional[str] = Field(default=None, description="Meeting passcode, if any")
    bot_name: Optional[str] = Field(default=None, description="Display name for the bot in the meeting")


class JoinResponse(BaseModel):
    """Response for a join request."""
    success: bool
    meeting_id: str
    platform: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[str] = None


class LeaveRequest(BaseModel):
    """Request to leave a meeting."""
    meeting_id: str = Field(..., description="Meeting ID returned by join", min_length=1)


class LeaveResponse(BaseModel):
    """Response for a leave request."""
    success: bool
    meeting_id: str
    reason: Optional[str] = None
    already_leaving: bool = False


class ActiveMeeting(BaseModel):
    """One entry of the active meetings list."""
    meeting_id: str
    platform: str
    start_time: datetime
    status: str


class ScheduleRequest(BaseModel):
    """Request to join a meeting at a later time."""
    platform: str = Field(..., min_length=1)
    meeting_url: str = Field(..., min_length=10)
    scheduled_time: datetime = Field(..., description="When to join (naive values use the configured timezone)")
    password: Optional[str] = None
    bot_name: Optional[str] = None


class ScheduleResponse(BaseModel):
    """Acknowledgement for a scheduled join."""
    success: bool = True
    job_id: str
    scheduled_time: datetime
    message: str


class ScheduledJoinInfo(BaseModel):
    """One pending scheduled join."""
    job_id: str
    meeting_url: str
    platform: str
    scheduled_time: datetime
    bot_name: Optional[str] = None


class HealthCheckResponse(BaseModel):
    """Health check response."""
    status: str = "ok"
    timestamp: datetime
    version: str
    active_meetings: int
    scheduled_joins: int


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str
    error_code: Optional[str] = None


__all__ = [
    "JoinRequest",
    "JoinResponse",
    "LeaveRequest",
    "LeaveResponse",
    "ActiveMeeting",
    "ScheduleRequest",
    "ScheduleResponse",
    "ScheduledJoinInfo",
    "HealthCheckResponse",
    "ErrorResponse",
]

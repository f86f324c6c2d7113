"""
API v1 schemas module.
"""

from .meeting import (
    JoinRequest,
    JoinResponse,
    LeaveRequest,
    LeaveResponse,
    ActiveMeeting,
    ScheduleRequest,
    ScheduleResponse,
    ScheduledJoinInfo,
    HealthCheckResponse,
    ErrorResponse,
)

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

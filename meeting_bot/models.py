"""
Data models for meeting sessions and deferred joins.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional
from enum import Enum

from meeting_bot.config.settings import MeetingPlatform


class SessionStatus(str, Enum):
    """Lifecycle states of an automated participant."""
    JOINING = "joining"
    ACTIVE = "active"
    LEAVING = "leaving"
    FAILED = "failed"
    CLOSED = "closed"


@dataclass
class MeetingSession:
    """
    Represents one automated participant inside a conferencing session.

    The driver handle is owned exclusively by this session and is never
    exposed through summaries.
    """
    meeting_id: str
    platform: MeetingPlatform
    meeting_url: str
    bot_name: str
    start_time: datetime
    status: SessionStatus = SessionStatus.JOINING
    driver_handle: Optional[Any] = field(default=None, repr=False)

    @property
    def is_active(self) -> bool:
        """Check if the session reached the joined state."""
        return self.status == SessionStatus.ACTIVE

    def summary(self) -> "SessionSummary":
        """Snapshot without the driver handle."""
        return SessionSummary(
            meeting_id=self.meeting_id,
            platform=self.platform,
            start_time=self.start_time,
            status=self.status,
        )


@dataclass(frozen=True)
class SessionSummary:
    """Read-only view of a session returned by registry listings."""
    meeting_id: str
    platform: MeetingPlatform
    start_time: datetime
    status: SessionStatus

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "meeting_id": self.meeting_id,
            "platform": self.platform.value,
            "start_time": self.start_time.isoformat(),
            "status": self.status.value,
        }


@dataclass
class ScheduledJoin:
    """
    A deferred join instruction. Lives in memory only.
    """
    job_id: str
    meeting_url: str
    platform: MeetingPlatform
    scheduled_time: datetime
    password: Optional[str] = None
    bot_name: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization (password omitted)."""
        return {
            "job_id": self.job_id,
            "meeting_url": self.meeting_url,
            "platform": self.platform.value,
            "scheduled_time": self.scheduled_time.isoformat(),
            "bot_name": self.bot_name,
        }


@dataclass
class JoinOutcome:
    """Value returned by a platform strategy once the join sequence completes."""
    platform: MeetingPlatform
    joined_at: datetime
    steps: List[str] = field(default_factory=list)


@dataclass
class JoinResult:
    """Outcome of a join request as reported to callers."""
    success: bool
    meeting_id: str
    platform: Optional[MeetingPlatform] = None
    reason: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "meeting_id": self.meeting_id,
            "platform": self.platform.value if self.platform else None,
            "reason": self.reason,
            "error": self.error,
        }


@dataclass
class LeaveResult:
    """Outcome of a leave request as reported to callers."""
    success: bool
    meeting_id: str
    reason: Optional[str] = None
    already_leaving: bool = False

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "meeting_id": self.meeting_id,
            "reason": self.reason,
            "already_leaving": self.already_leaving,
        }

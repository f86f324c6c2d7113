"""
Meeting Registry - in-memory table of automated sessions keyed by meeting ID.

Every method is synchronous, so each call is atomic on the event loop.
"""

from typing import Dict, Iterator, List, Optional

from meeting_bot.config import get_logger
from meeting_bot.core.exceptions import DuplicateSessionError, SessionNotFoundError
from meeting_bot.models import MeetingSession, SessionStatus, SessionSummary

logger = get_logger("meeting_registry")


class MeetingRegistry:
    """Single authoritative map from meeting ID to session."""

    def __init__(self) -> None:
        self._sessions: Dict[str, MeetingSession] = {}

    def register(self, session: MeetingSession) -> None:
        """
        Add a session.

        Raises:
            DuplicateSessionError: if any session already uses the meeting ID.
        """
        if session.meeting_id in self._sessions:
            raise DuplicateSessionError(session.meeting_id)
        self._sessions[session.meeting_id] = session
        logger.debug(f"Registered {session.meeting_id} ({session.status.value})")

    def lookup(self, meeting_id: str) -> MeetingSession:
        """
        Raises:
            SessionNotFoundError: if no session uses the meeting ID.
        """
        session = self._sessions.get(meeting_id)
        if session is None:
            raise SessionNotFoundError(meeting_id)
        return session

    def get(self, meeting_id: str) -> Optional[MeetingSession]:
        return self._sessions.get(meeting_id)

    def transition(self, meeting_id: str, status: SessionStatus) -> MeetingSession:
        """Set the status of a registered session."""
        session = self.lookup(meeting_id)
        previous = session.status
        session.status = status
        logger.debug(f"{meeting_id}: {previous.value} -> {status.value}")
        return session

    def remove(self, meeting_id: str) -> Optional[MeetingSession]:
        """Remove and return the session, or None if it was not registered."""
        session = self._sessions.pop(meeting_id, None)
        if session is not None:
            logger.debug(f"Removed {meeting_id}")
        return session

    def owns(self, session: MeetingSession) -> bool:
        """True if this exact session object is the registered entry."""
        return self._sessions.get(session.meeting_id) is session

    def list(self) -> List[SessionSummary]:
        """Snapshot of all sessions, without driver handles."""
        return [session.summary() for session in self._sessions.values()]

    def sessions(self) -> Iterator[MeetingSession]:
        """Iterate over a copy of the registered sessions."""
        return iter(list(self._sessions.values()))

    def __contains__(self, meeting_id: object) -> bool:
        return meeting_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

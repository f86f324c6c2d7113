"""
Dependency injection for the Meeting Bot API.
Provides the orchestrator instance to API endpoints.
"""

from typing import Optional

from meeting_bot.core.exceptions import HTTPInternalServerError
from meeting_bot.meeting_handler.meeting_orchestrator import MeetingOrchestrator

_orchestrator_instance: Optional[MeetingOrchestrator] = None


def set_orchestrator_instance(instance: Optional[MeetingOrchestrator]) -> None:
    """Set the global orchestrator instance."""
    global _orchestrator_instance
    _orchestrator_instance = instance


async def get_orchestrator() -> MeetingOrchestrator:
    """
    Dependency injection for the MeetingOrchestrator.

    Raises:
        HTTPInternalServerError: If the orchestrator is not initialized
    """
    if _orchestrator_instance is None:
        raise HTTPInternalServerError("Meeting orchestrator not initialized")

    return _orchestrator_instance

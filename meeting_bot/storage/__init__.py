"""
Session storage module.
"""

from .meeting_registry import MeetingRegistry

__all__ = ["MeetingRegistry"]

"""
Scheduler module.
"""

from .meeting_scheduler import MeetingScheduler, SchedulerAdapter

__all__ = ["MeetingScheduler", "SchedulerAdapter"]

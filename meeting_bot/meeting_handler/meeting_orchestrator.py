"""
Meeting Orchestrator

Main coordinator that validates join/leave/schedule requests, routes joins to
the platform strategy, owns the session registry and wires the audio relay.

Session lifecycle:
    joining -> active -> leaving -> closed
    joining -> failed, active -> failed (browser died)
Failed and closed sessions are removed from the registry.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Type, Union

from meeting_bot.config import settings, get_logger
from meeting_bot.config.settings import MeetingPlatform
from meeting_bot.core.exceptions import (
    DriverCrashError,
    DuplicateSessionError,
    JoinAbortedError,
    MeetingBotException,
    UnsupportedPlatformError,
)
from meeting_bot.models import (
    JoinResult,
    LeaveResult,
    MeetingSession,
    ScheduledJoin,
    SessionStatus,
    SessionSummary,
)
from meeting_bot.recording.audio_relay import AudioRelay
from meeting_bot.scheduler.meeting_scheduler import MeetingScheduler, SchedulerAdapter
from meeting_bot.storage.meeting_registry import MeetingRegistry
from meeting_bot.utils.url_extractor import (
    detect_platform_from_url,
    extract_meeting_id,
    parse_platform,
    url_origin,
)
from .base import PlatformStrategy
from .browser_driver import BrowserSessionDriver
from .meet_handler import MeetMeetingHandler
from .teams_meeting_handler import TeamsMeetingHandler
from .zoom_meeting_handler import ZoomMeetingHandler


logger = get_logger("meeting_orchestrator")

STRATEGY_CLASSES: Dict[MeetingPlatform, Type[PlatformStrategy]] = {
    MeetingPlatform.ZOOM: ZoomMeetingHandler,
    MeetingPlatform.GOOGLE_MEET: MeetMeetingHandler,
    MeetingPlatform.TEAMS: TeamsMeetingHandler,
}


class MeetingOrchestrator:
    """
    Main coordinator for all meeting platforms.

    The registry is private to the orchestrator; callers only see
    JoinResult/LeaveResult values and session summaries.
    """

    def __init__(
        self,
        driver: Optional[BrowserSessionDriver] = None,
        registry: Optional[MeetingRegistry] = None,
        relay: Optional[AudioRelay] = None,
        scheduler: Optional[SchedulerAdapter] = None,
        strategies: Optional[Dict[MeetingPlatform, PlatformStrategy]] = None,
    ):
        self.driver = driver or BrowserSessionDriver()
        self.registry = registry or MeetingRegistry()
        self.relay = relay or AudioRelay()
        self.scheduler = scheduler or MeetingScheduler()
        self.strategies = strategies or {p: cls() for p, cls in STRATEGY_CLASSES.items()}

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def resolve_platform(self, platform: Union[str, MeetingPlatform]) -> MeetingPlatform:
        """
        Raises:
            UnsupportedPlatformError: unknown name, disabled platform, or no strategy.
        """
        if isinstance(platform, MeetingPlatform):
            resolved = platform
        else:
            resolved = parse_platform(platform)

        if (
            resolved is None
            or resolved not in settings.enabled_platforms
            or resolved not in self.strategies
        ):
            raise UnsupportedPlatformError(str(getattr(platform, "value", platform)))
        return resolved

    # -------------------------------------------------------------------------
    # Join
    # -------------------------------------------------------------------------

    async def request_join(
        self,
        platform: Union[str, MeetingPlatform],
        meeting_url: str,
        password: Optional[str] = None,
        bot_name: Optional[str] = None,
    ) -> JoinResult:
        """
        Join a meeting and keep the bot in it until leave or browser death.

        Raises:
            UnsupportedPlatformError: before any browser is launched.
            DuplicateSessionError: a session already exists for the meeting ID.

        Returns:
            JoinResult; on failure the browser has already been closed and no
            registry entry remains.
        """
        resolved = self.resolve_platform(platform)
        meeting_id = extract_meeting_id(meeting_url)
        bot_name = bot_name or settings.bot.default_bot_name
        detected = detect_platform_from_url(meeting_url)
        if detected is not None and detected != resolved:
            logger.warning(f"URL looks like a {detected.value} meeting but platform is {resolved.value}: {meeting_url}")

        session = MeetingSession(
            meeting_id=meeting_id,
            platform=resolved,
            meeting_url=meeting_url,
            bot_name=bot_name,
            start_time=datetime.now(timezone.utc),
        )
        # Reserves the meeting ID before the first await
        self.registry.register(session)

        logger.info(
            f"Joining meeting: id='{meeting_id}', platform='{resolved.value}', url='{meeting_url}'"
        )

        try:
            handle = await self.driver.launch(media_permissions_for=url_origin(meeting_url))
            session.driver_handle = handle
            # Tap must be in place before the meeting page loads
            await self.relay.attach(handle, meeting_id)
            await self.strategies[resolved].join(
                handle,
                meeting_url,
                password,
                bot_name,
                should_abort=lambda: not self.registry.owns(session),
            )
            if handle.has_crashed:
                raise DriverCrashError(f"Browser for meeting {meeting_id} died during join")
        except JoinAbortedError as e:
            logger.debug(f"Join for {meeting_id} stopped before '{e.step}'")
        except MeetingBotException as e:
            await self._abort_join(session, e.message)
            return JoinResult(
                success=False,
                meeting_id=meeting_id,
                platform=resolved,
                reason=e.message,
                error=e.code,
            )
        except asyncio.CancelledError:
            await self._abort_join(session, "join cancelled")
            raise
        except Exception as e:
            await self._abort_join(session, str(e))
            return JoinResult(
                success=False,
                meeting_id=meeting_id,
                platform=resolved,
                reason=str(e),
                error=type(e).__name__,
            )

        # A leave may have removed the session while the join was running
        if not self.registry.owns(session) or session.status != SessionStatus.JOINING:
            logger.info(f"Meeting {meeting_id} was left during join; tearing down")
            await self._teardown(session)
            session.status = SessionStatus.CLOSED
            return JoinResult(
                success=False,
                meeting_id=meeting_id,
                platform=resolved,
                reason="Leave requested while joining; session closed",
            )

        self.registry.transition(meeting_id, SessionStatus.ACTIVE)
        self.relay.start(meeting_id)
        handle.on_crash(lambda reason: self._on_driver_crash(session, reason))

        logger.info(f"✅ Joined {resolved.value} meeting: {meeting_id}")
        return JoinResult(success=True, meeting_id=meeting_id, platform=resolved)

    async def _abort_join(self, session: MeetingSession, reason: str) -> None:
        """Mark a join failed, drop its entry and release its browser."""
        logger.error(f"❌ Failed to join meeting {session.meeting_id}: {reason}")
        if self.registry.owns(session):
            self.registry.transition(session.meeting_id, SessionStatus.FAILED)
            self.registry.remove(session.meeting_id)
        else:
            session.status = SessionStatus.FAILED
        await self._teardown(session)

    async def _teardown(self, session: MeetingSession) -> None:
        """Detach the relay and close the session's browser."""
        if session.driver_handle is None:
            return
        await self.relay.detach(session.meeting_id, session.driver_handle)
        await session.driver_handle.close()

    async def _on_driver_crash(self, session: MeetingSession, reason: str) -> None:
        """Browser died under an active session: fail it and clean up."""
        if not self.registry.owns(session) or not session.is_active:
            return

        error = DriverCrashError(
            f"Browser for meeting {session.meeting_id} died: {reason}",
            {"meeting_id": session.meeting_id},
        )
        logger.error(error.message)
        self.registry.transition(session.meeting_id, SessionStatus.FAILED)
        self.registry.remove(session.meeting_id)
        await self._teardown(session)

    # -------------------------------------------------------------------------
    # Leave
    # -------------------------------------------------------------------------

    async def request_leave(self, meeting_id: str) -> LeaveResult:
        """
        Leave a meeting.

        Raises:
            SessionNotFoundError: no session for the meeting ID.
        """
        session = self.registry.lookup(meeting_id)

        if session.status == SessionStatus.LEAVING:
            logger.info(f"Leave already in progress for {meeting_id}")
            return LeaveResult(
                success=True,
                meeting_id=meeting_id,
                reason="Leave already in progress",
                already_leaving=True,
            )

        if session.status == SessionStatus.JOINING:
            # The in-flight join step finishes on its own and tears down
            self.registry.transition(meeting_id, SessionStatus.LEAVING)
            self.registry.remove(meeting_id)
            logger.info(f"Left meeting {meeting_id} during join")
            return LeaveResult(
                success=True,
                meeting_id=meeting_id,
                reason="Left meeting; pending join will be closed",
            )

        self.registry.transition(meeting_id, SessionStatus.LEAVING)
        try:
            await self._teardown(session)
        finally:
            self.registry.transition(meeting_id, SessionStatus.CLOSED)
            self.registry.remove(meeting_id)

        logger.info(f"Left meeting: {meeting_id}")
        return LeaveResult(success=True, meeting_id=meeting_id, reason="Left meeting")

    def list_active(self) -> List[SessionSummary]:
        return self.registry.list()

    # -------------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------------

    def schedule_join(
        self,
        platform: Union[str, MeetingPlatform],
        meeting_url: str,
        scheduled_time: datetime,
        password: Optional[str] = None,
        bot_name: Optional[str] = None,
    ) -> ScheduledJoin:
        """
        Schedule a join for later. Must be called from the event loop.

        Raises:
            UnsupportedPlatformError: unknown or disabled platform.
            DuplicateSessionError: a session already exists for the meeting ID.
        """
        resolved = self.resolve_platform(platform)
        meeting_id = extract_meeting_id(meeting_url)
        if meeting_id in self.registry:
            raise DuplicateSessionError(meeting_id)

        job = ScheduledJoin(
            job_id=f"join_{uuid.uuid4().hex[:12]}",
            meeting_url=meeting_url,
            platform=resolved,
            scheduled_time=scheduled_time,
            password=password,
            bot_name=bot_name,
        )
        self.scheduler.start()
        self.scheduler.schedule(job, self._run_scheduled_join)
        return job

    async def _run_scheduled_join(self, job: ScheduledJoin) -> None:
        """Scheduled join entry point. The original caller is gone, so only log."""
        try:
            result = await self.request_join(job.platform, job.meeting_url, job.password, job.bot_name)
        except MeetingBotException as e:
            logger.error(f"Scheduled join {job.job_id} rejected: {e.message}")
            return

        if not result.success:
            logger.error(f"Scheduled join {job.job_id} failed: {result.reason}")

    def list_scheduled(self) -> List[ScheduledJoin]:
        return self.scheduler.scheduled()

    def cancel_scheduled(self, job_id: str) -> bool:
        return self.scheduler.cancel(job_id)

    # -------------------------------------------------------------------------
    # Service lifecycle
    # -------------------------------------------------------------------------

    async def start(self) -> None:
        """Start the browser runtime and the scheduler."""
        await self.driver.start()
        self.scheduler.start()

    async def shutdown(self) -> None:
        """Leave every meeting and release all resources."""
        logger.info("Shutting down meeting orchestrator...")
        self.scheduler.stop()

        for session in self.registry.sessions():
            try:
                await self.request_leave(session.meeting_id)
            except MeetingBotException as e:
                logger.warning(f"Error leaving {session.meeting_id} on shutdown: {e.message}")

        await self.relay.close()
        await self.driver.stop()
        logger.info("Meeting orchestrator shutdown complete")

    def get_status(self) -> dict:
        """Current sessions and pending joins."""
        return {
            "active_sessions": [s.to_dict() for s in self.list_active()],
            "scheduled_joins": [j.to_dict() for j in self.list_scheduled()],
        }

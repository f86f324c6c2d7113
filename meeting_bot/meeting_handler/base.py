"""
Platform strategy base.

A strategy describes one platform's join sequence as an ordered list of named
steps. Each step issues driver calls with its own timeout; the first failing
required step aborts the join with a JoinError naming the step. Steps are not
retried here.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from meeting_bot.config import settings, get_logger
from meeting_bot.config.settings import MeetingPlatform
from meeting_bot.core.exceptions import (
    DriverCrashError,
    DriverError,
    DriverTimeoutError,
    JoinAbortedError,
    JoinStepFailure,
    JoinStepTimeoutError,
)
from meeting_bot.models import JoinOutcome
from .browser_driver import DriverHandle
from .selectors import get_selector


logger = get_logger("platform_strategy")


@dataclass
class JoinStep:
    """One named step of a join sequence."""
    name: str
    action: Callable[[], Awaitable[object]]
    optional: bool = False


class PlatformStrategy(ABC):
    """Join sequence for one conferencing platform."""

    platform: MeetingPlatform

    def __init__(
        self,
        step_timeout_ms: Optional[int] = None,
        navigation_timeout_ms: Optional[int] = None,
        admission_timeout_seconds: Optional[int] = None,
    ) -> None:
        self.step_timeout_ms = step_timeout_ms or settings.browser.step_timeout_ms
        self.navigation_timeout_ms = navigation_timeout_ms or settings.browser.navigation_timeout_ms
        self.admission_timeout_seconds = (
            admission_timeout_seconds
            if admission_timeout_seconds is not None
            else settings.bot.admission_timeout_seconds
        )

    @abstractmethod
    def build_steps(
        self,
        handle: DriverHandle,
        meeting_url: str,
        password: Optional[str],
        bot_name: str,
    ) -> List[JoinStep]:
        """Return the ordered join steps for this platform."""

    async def join(
        self,
        handle: DriverHandle,
        meeting_url: str,
        password: Optional[str],
        bot_name: str,
        should_abort: Optional[Callable[[], bool]] = None,
    ) -> JoinOutcome:
        """
        Drive the browser through the join sequence.

        should_abort is checked before each step.

        Raises:
            JoinAbortedError: should_abort returned True.
            JoinStepTimeoutError: a step exceeded its timeout.
            JoinStepFailure: a step failed for another reason.
            DriverCrashError: the browser died mid-join.
        """
        logger.info(f"Joining {self.platform.value} meeting as '{bot_name}': {meeting_url}")
        completed: List[str] = []

        for step in self.build_steps(handle, meeting_url, password, bot_name):
            if should_abort is not None and should_abort():
                raise JoinAbortedError(step.name, "session left during join")
            if await self._run_step(step):
                completed.append(step.name)

        logger.info(f"Join sequence complete for {meeting_url} ({len(completed)} steps)")
        return JoinOutcome(
            platform=self.platform,
            joined_at=datetime.now(timezone.utc),
            steps=completed,
        )

    async def _run_step(self, step: JoinStep) -> bool:
        """Run one step. Returns False when an optional step was skipped."""
        logger.debug(f"[{self.platform.value}] step: {step.name}")
        try:
            await step.action()
            return True
        except DriverCrashError:
            raise
        except DriverTimeoutError as e:
            if step.optional:
                logger.debug(f"Optional step '{step.name}' skipped: {e.message}")
                return False
            raise JoinStepTimeoutError(step.name, e.message) from e
        except DriverError as e:
            if step.optional:
                logger.debug(f"Optional step '{step.name}' skipped: {e.message}")
                return False
            raise JoinStepFailure(step.name, e.message) from e
        except Exception as e:
            raise JoinStepFailure(step.name, str(e)) from e

    # -------------------------------------------------------------------------
    # Step building blocks
    # -------------------------------------------------------------------------

    def selector(self, element_type: str) -> str:
        return get_selector(self.platform, element_type)

    async def navigate(self, handle: DriverHandle, url: str) -> None:
        await handle.navigate(url, timeout=self.navigation_timeout_ms)

    async def fill(self, handle: DriverHandle, element_type: str, text: str) -> None:
        selector = self.selector(element_type)
        await handle.wait_for_element(selector, timeout=self.step_timeout_ms)
        await handle.type_text(selector, text, timeout=self.step_timeout_ms)

    async def click(self, handle: DriverHandle, element_type: str, timeout: Optional[int] = None) -> None:
        selector = self.selector(element_type)
        timeout = timeout or self.step_timeout_ms
        await handle.wait_for_element(selector, timeout=timeout)
        await handle.click(selector, timeout=timeout)

    async def wait_for_admission(self, handle: DriverHandle) -> None:
        """Wait in the lobby until an in-meeting control shows up."""
        await handle.wait_for_element(
            self.selector("in_meeting"),
            timeout=self.admission_timeout_seconds * 1000,
        )

"""
Microsoft Teams Meeting Handler

Joins Teams meetings in the browser:
- Force the web experience and pick "Continue on this browser"
- Display name entry on the pre-join screen
- Camera and microphone off before "Join now"
- Lobby admission
"""

from __future__ import annotations

from typing import List, Optional

from meeting_bot.config.settings import MeetingPlatform
from .base import JoinStep, PlatformStrategy
from .browser_driver import DriverHandle


def to_web_join_url(meeting_url: str) -> str:
    """Add webjoin=true so Teams skips the desktop app launcher."""
    if "webjoin=true" in meeting_url:
        return meeting_url
    connector = "&" if "?" in meeting_url else "?"
    return f"{meeting_url}{connector}webjoin=true"


class TeamsMeetingHandler(PlatformStrategy):
    """Join sequence for Microsoft Teams meetings."""

    platform = MeetingPlatform.TEAMS

    def build_steps(
        self,
        handle: DriverHandle,
        meeting_url: str,
        password: Optional[str],
        bot_name: str,
    ) -> List[JoinStep]:
        return [
            JoinStep("open_meeting", lambda: self.navigate(handle, to_web_join_url(meeting_url))),
            JoinStep("continue_on_browser", lambda: self.click(handle, "continue_browser")),
            JoinStep("enter_name", lambda: self.fill(handle, "name_input", bot_name)),
            JoinStep("turn_off_camera", lambda: self.click(handle, "camera_toggle")),
            JoinStep("turn_off_microphone", lambda: self.click(handle, "mic_toggle")),
            JoinStep("click_join", lambda: self.click(handle, "join_button")),
            JoinStep("wait_for_admission", lambda: self.wait_for_admission(handle)),
        ]

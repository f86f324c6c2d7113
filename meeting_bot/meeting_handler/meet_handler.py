"""
Google Meet Meeting Handler

Joins Google Meet as a guest:
- Dismiss first-run popups
- Guest name entry
- Camera and microphone off before asking to join
- Lobby admission
"""

from __future__ import annotations

from typing import List, Optional

from meeting_bot.config.settings import MeetingPlatform
from .base import JoinStep, PlatformStrategy
from .browser_driver import DriverHandle

POPUP_TIMEOUT_MS = 3000


class MeetMeetingHandler(PlatformStrategy):
    """Join sequence for Google Meet meetings."""

    platform = MeetingPlatform.GOOGLE_MEET

    def build_steps(
        self,
        handle: DriverHandle,
        meeting_url: str,
        password: Optional[str],
        bot_name: str,
    ) -> List[JoinStep]:
        # Meet has no meeting passcode; password is ignored
        return [
            JoinStep("open_meeting", lambda: self.navigate(handle, meeting_url)),
            JoinStep(
                "dismiss_popup",
                lambda: self.click(handle, "dismiss_popup", timeout=POPUP_TIMEOUT_MS),
                optional=True,
            ),
            JoinStep("enter_name", lambda: self.fill(handle, "name_input", bot_name)),
            JoinStep("turn_off_camera", lambda: self.click(handle, "camera_toggle")),
            JoinStep("turn_off_microphone", lambda: self.click(handle, "mic_toggle")),
            JoinStep("ask_to_join", lambda: self.click(handle, "join_button")),
            JoinStep("wait_for_admission", lambda: self.wait_for_admission(handle)),
        ]

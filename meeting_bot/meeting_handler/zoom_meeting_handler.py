"""
Zoom Meeting Handler

Joins Zoom meetings through the browser web client:
- Redirect from the app download page to /wc/join/
- Display name and optional passcode entry
- Mute microphone and stop video in the preview
"""

from __future__ import annotations

import re
from typing import List, Optional

from meeting_bot.config.settings import MeetingPlatform
from .base import JoinStep, PlatformStrategy
from .browser_driver import DriverHandle


def to_web_client_url(meeting_url: str) -> str:
    """
    Rewrite a Zoom join link to the web client so no app download is offered.

    https://us02web.zoom.us/j/123?pwd=x -> https://us02web.zoom.us/wc/join/123?pwd=x
    """
    return re.sub(r'zoom\.us/j/', 'zoom.us/wc/join/', meeting_url, count=1)


class ZoomMeetingHandler(PlatformStrategy):
    """Join sequence for Zoom meetings."""

    platform = MeetingPlatform.ZOOM

    def build_steps(
        self,
        handle: DriverHandle,
        meeting_url: str,
        password: Optional[str],
        bot_name: str,
    ) -> List[JoinStep]:
        steps = [
            JoinStep("open_web_client", lambda: self.navigate(handle, to_web_client_url(meeting_url))),
            JoinStep("enter_name", lambda: self.fill(handle, "name_input", bot_name)),
        ]
        # Without a passcode the step is skipped; Zoom rejects entry itself if one was needed
        if password:
            steps.append(JoinStep("enter_password", lambda: self.fill(handle, "password_input", password)))
        steps += [
            JoinStep("mute_microphone", lambda: self.click(handle, "mic_toggle")),
            JoinStep("stop_video", lambda: self.click(handle, "camera_toggle")),
            JoinStep("click_join", lambda: self.click(handle, "join_button")),
            JoinStep("wait_for_admission", lambda: self.wait_for_admission(handle)),
        ]
        return steps

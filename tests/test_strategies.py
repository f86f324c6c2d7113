"""Tests for the platform join sequences."""

import pytest

from meeting_bot.core.exceptions import DriverCrashError, JoinAbortedError, JoinStepFailure, JoinStepTimeoutError
from meeting_bot.meeting_handler.meet_handler import MeetMeetingHandler
from meeting_bot.meeting_handler.selectors import get_selector
from meeting_bot.meeting_handler.teams_meeting_handler import TeamsMeetingHandler, to_web_join_url
from meeting_bot.meeting_handler.zoom_meeting_handler import ZoomMeetingHandler, to_web_client_url
from meeting_bot.config.settings import MeetingPlatform

from conftest import FakeHandle


ZOOM_URL = "https://zoom.us/j/123456789"
MEET_URL = "https://meet.google.com/abc-defg-hij"
TEAMS_URL = "https://teams.live.com/meet/9391234567890"


class TestZoomMeetingHandler:

    def test_web_client_url(self):
        assert to_web_client_url(ZOOM_URL) == "https://zoom.us/wc/join/123456789"

    @pytest.mark.asyncio
    async def test_join_sequence_without_password(self):
        handle = FakeHandle("https://zoom.us")
        outcome = await ZoomMeetingHandler().join(handle, ZOOM_URL, None, "Notes Bot")

        assert outcome.platform == MeetingPlatform.ZOOM
        assert outcome.steps == [
            "open_web_client",
            "enter_name",
            "mute_microphone",
            "stop_video",
            "click_join",
            "wait_for_admission",
        ]
        assert handle.calls[0] == ("navigate", "https://zoom.us/wc/join/123456789")
        assert handle.typed[get_selector(MeetingPlatform.ZOOM, "name_input")] == "Notes Bot"

    @pytest.mark.asyncio
    async def test_join_sequence_with_password(self):
        handle = FakeHandle("https://zoom.us")
        outcome = await ZoomMeetingHandler().join(handle, ZOOM_URL, "s3cret", "Notes Bot")

        assert outcome.steps.index("enter_password") == outcome.steps.index("enter_name") + 1
        assert handle.typed[get_selector(MeetingPlatform.ZOOM, "password_input")] == "s3cret"

    @pytest.mark.asyncio
    async def test_step_timeout_names_the_step(self):
        handle = FakeHandle("https://zoom.us", fail_on="input-for-pwd")

        with pytest.raises(JoinStepTimeoutError) as exc_info:
            await ZoomMeetingHandler().join(handle, ZOOM_URL, "s3cret", "Notes Bot")

        assert exc_info.value.step == "enter_password"
        # nothing after the failing step ran
        assert not any(target == get_selector(MeetingPlatform.ZOOM, "join_button") for _, target in handle.calls)

    @pytest.mark.asyncio
    async def test_driver_error_becomes_step_failure(self):
        handle = FakeHandle("https://zoom.us", fail_on="preview-join-button", fail_with="error")

        with pytest.raises(JoinStepFailure) as exc_info:
            await ZoomMeetingHandler().join(handle, ZOOM_URL, None, "Notes Bot")
        assert exc_info.value.step == "click_join"

    @pytest.mark.asyncio
    async def test_browser_crash_passes_through(self):
        handle = FakeHandle("https://zoom.us", fail_on="input-for-name", fail_with="crash")

        with pytest.raises(DriverCrashError):
            await ZoomMeetingHandler().join(handle, ZOOM_URL, None, "Notes Bot")


class TestMeetMeetingHandler:

    @pytest.mark.asyncio
    async def test_join_sequence(self):
        handle = FakeHandle("https://meet.google.com")
        outcome = await MeetMeetingHandler().join(handle, MEET_URL, None, "Notes Bot")

        assert outcome.steps == [
            "open_meeting",
            "dismiss_popup",
            "enter_name",
            "turn_off_camera",
            "turn_off_microphone",
            "ask_to_join",
            "wait_for_admission",
        ]
        assert handle.calls[0] == ("navigate", MEET_URL)

    @pytest.mark.asyncio
    async def test_missing_popup_is_skipped(self):
        handle = FakeHandle("https://meet.google.com", fail_on='aria-label="Dismiss"')
        outcome = await MeetMeetingHandler().join(handle, MEET_URL, None, "Notes Bot")

        assert "dismiss_popup" not in outcome.steps
        assert outcome.steps[-1] == "wait_for_admission"

    @pytest.mark.asyncio
    async def test_admission_timeout(self):
        handle = FakeHandle("https://meet.google.com", fail_on='aria-label*="Leave call"')

        with pytest.raises(JoinStepTimeoutError) as exc_info:
            await MeetMeetingHandler().join(handle, MEET_URL, None, "Notes Bot")
        assert exc_info.value.step == "wait_for_admission"


class TestTeamsMeetingHandler:

    def test_web_join_url(self):
        assert to_web_join_url(TEAMS_URL) == TEAMS_URL + "?webjoin=true"
        assert to_web_join_url(TEAMS_URL + "?a=1") == TEAMS_URL + "?a=1&webjoin=true"
        assert to_web_join_url(TEAMS_URL + "?webjoin=true") == TEAMS_URL + "?webjoin=true"

    @pytest.mark.asyncio
    async def test_join_sequence(self):
        handle = FakeHandle("https://teams.live.com")
        outcome = await TeamsMeetingHandler().join(handle, TEAMS_URL, None, "Notes Bot")

        assert outcome.steps[:2] == ["open_meeting", "continue_on_browser"]
        assert outcome.steps[-1] == "wait_for_admission"
        assert handle.calls[0] == ("navigate", TEAMS_URL + "?webjoin=true")

    @pytest.mark.asyncio
    async def test_continue_on_browser_is_required(self):
        handle = FakeHandle("https://teams.live.com", fail_on="use-web-client")

        with pytest.raises(JoinStepTimeoutError) as exc_info:
            await TeamsMeetingHandler().join(handle, TEAMS_URL, None, "Notes Bot")
        assert exc_info.value.step == "continue_on_browser"


class TestAbort:

    @pytest.mark.asyncio
    async def test_abort_checked_before_each_step(self):
        handle = FakeHandle("https://zoom.us")
        checks = []

        def should_abort():
            checks.append(len(handle.calls))
            return len(checks) > 2

        with pytest.raises(JoinAbortedError) as exc_info:
            await ZoomMeetingHandler().join(handle, ZOOM_URL, None, "Notes Bot", should_abort=should_abort)

        assert exc_info.value.step == "mute_microphone"
        assert len(checks) == 3

"""Tests for meeting URL helpers."""

import pytest

from meeting_bot.config.settings import MeetingPlatform
from meeting_bot.utils.url_extractor import (
    detect_platform_from_url,
    extract_meeting_id,
    parse_platform,
    url_origin,
)


class TestExtractMeetingId:
    """Meeting identifiers derived from join URLs."""

    def test_zoom_join_link(self):
        assert extract_meeting_id("https://zoom.us/j/123456789") == "123456789"

    def test_zoom_link_with_passcode_query(self):
        assert extract_meeting_id("https://us02web.zoom.us/j/8123456789?pwd=abcDEF") == "8123456789"

    def test_zoom_web_client_link(self):
        assert extract_meeting_id("https://zoom.us/wc/join/987654321") == "987654321"

    def test_meet_link(self):
        assert extract_meeting_id("https://meet.google.com/abc-defg-hij") == "abc-defg-hij"

    def test_teams_live_link(self):
        assert extract_meeting_id("https://teams.live.com/meet/9391234567890") == "9391234567890"

    def test_teams_meetup_join_link(self):
        url = "https://teams.microsoft.com/l/meetup-join/19%3ameeting_abc%40thread.v2/0?context=x"
        assert extract_meeting_id(url) == "19%3ameeting_abc%40thread.v2"

    def test_unrecognized_url_falls_back_to_capped_slug(self):
        meeting_id = extract_meeting_id("https://example.com/rooms/weekly-sync-team-alpha")
        assert meeting_id == "httpsexamplecomrooms"
        assert len(meeting_id) == 20

    def test_same_url_gives_same_id(self):
        url = "https://example.org/some/room?id=42"
        assert extract_meeting_id(url) == extract_meeting_id(url)


class TestParsePlatform:
    """Platform names and aliases."""

    @pytest.mark.parametrize("name,expected", [
        ("zoom", MeetingPlatform.ZOOM),
        ("ZOOM", MeetingPlatform.ZOOM),
        ("meet", MeetingPlatform.GOOGLE_MEET),
        ("google", MeetingPlatform.GOOGLE_MEET),
        ("googleMeet", MeetingPlatform.GOOGLE_MEET),
        ("Google Meet", MeetingPlatform.GOOGLE_MEET),
        ("google_meet", MeetingPlatform.GOOGLE_MEET),
        ("teams", MeetingPlatform.TEAMS),
        ("microsoft", MeetingPlatform.TEAMS),
        ("MS-Teams", MeetingPlatform.TEAMS),
    ])
    def test_known_names(self, name, expected):
        assert parse_platform(name) == expected

    @pytest.mark.parametrize("name", ["webex", "", "skype"])
    def test_unknown_names(self, name):
        assert parse_platform(name) is None


class TestUrlHelpers:

    def test_detect_platform(self):
        assert detect_platform_from_url("https://zoom.us/j/1") == MeetingPlatform.ZOOM
        assert detect_platform_from_url("https://meet.google.com/a-b") == MeetingPlatform.GOOGLE_MEET
        assert detect_platform_from_url("https://teams.live.com/meet/1") == MeetingPlatform.TEAMS
        assert detect_platform_from_url("https://example.com") is None

    def test_url_origin(self):
        assert url_origin("https://us02web.zoom.us/j/123?pwd=x") == "https://us02web.zoom.us"
        assert url_origin("https://meet.google.com/abc-defg-hij") == "https://meet.google.com"

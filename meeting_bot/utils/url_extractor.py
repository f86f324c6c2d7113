"""
Utility functions for meeting URLs: platform detection and meeting identifiers.
"""

import re
from typing import Optional

from meeting_bot.config.settings import MeetingPlatform


# Patterns capturing the platform's own meeting identifier
MEETING_ID_PATTERNS = {
    MeetingPlatform.ZOOM: [
        r'/(?:j|wc/join|wc)/(\d+)',
    ],
    MeetingPlatform.GOOGLE_MEET: [
        r'meet\.google\.com/([a-z]+(?:-[a-z]+)+)',
    ],
    MeetingPlatform.TEAMS: [
        r'meetup-join/([^/?#]+)',
        r'teams\.live\.com/meet/(\d+)',
    ],
}

# Names accepted for each platform in join requests
PLATFORM_ALIASES = {
    "zoom": MeetingPlatform.ZOOM,
    "meet": MeetingPlatform.GOOGLE_MEET,
    "google": MeetingPlatform.GOOGLE_MEET,
    "googlemeet": MeetingPlatform.GOOGLE_MEET,
    "google_meet": MeetingPlatform.GOOGLE_MEET,
    "teams": MeetingPlatform.TEAMS,
    "microsoft": MeetingPlatform.TEAMS,
    "msteams": MeetingPlatform.TEAMS,
    "ms_teams": MeetingPlatform.TEAMS,
}

FALLBACK_SLUG_LENGTH = 20


def parse_platform(name: str) -> Optional[MeetingPlatform]:
    """
    Resolve a platform name or alias.

    Args:
        name: Platform name as sent by a caller (e.g. "zoom", "googleMeet", "MS Teams").

    Returns:
        MeetingPlatform, or None if the name is not recognized.
    """
    if not name:
        return None
    key = re.sub(r'[\s-]+', '_', name.strip().lower())
    return PLATFORM_ALIASES.get(key) or PLATFORM_ALIASES.get(key.replace('_', ''))


def extract_meeting_id(url: str) -> str:
    """
    Derive the normalized meeting identifier from a join URL.

    Platform patterns are tried first; an unrecognized URL falls back to its
    alphanumeric characters, capped at FALLBACK_SLUG_LENGTH.

    Examples:
        https://zoom.us/j/123456789            -> 123456789
        https://meet.google.com/abc-defg-hij   -> abc-defg-hij
    """
    url = url or ""
    for patterns in MEETING_ID_PATTERNS.values():
        for pattern in patterns:
            match = re.search(pattern, url, re.IGNORECASE)
            if match:
                return match.group(1)

    return re.sub(r'[^a-zA-Z0-9]', '', url)[:FALLBACK_SLUG_LENGTH]


def detect_platform_from_url(url: str) -> Optional[MeetingPlatform]:
    """
    Detect the meeting platform from a URL.

    Args:
        url: Meeting URL.

    Returns:
        MeetingPlatform, or None when the host is not recognized.
    """
    if not url:
        return None

    url_lower = url.lower()

    if 'teams.microsoft.com' in url_lower or 'teams.live.com' in url_lower:
        return MeetingPlatform.TEAMS
    elif 'zoom.us' in url_lower:
        return MeetingPlatform.ZOOM
    elif 'meet.google.com' in url_lower:
        return MeetingPlatform.GOOGLE_MEET

    return None


def url_origin(url: str) -> str:
    """Return scheme://host of a URL, used for permission grants."""
    match = re.match(r'^(https?://[^/?#]+)', url or "", re.IGNORECASE)
    return match.group(1) if match else url

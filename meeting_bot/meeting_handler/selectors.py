"""
Platform-specific DOM selectors for the join flows.

Each entry is a list of alternatives tried together as one CSS selector list,
so every alternative must be plain CSS (Playwright's :has-text() is allowed,
the text= engine is not).

Note: meeting platforms update their UI frequently, so selectors need
periodic maintenance.
"""

from typing import Dict, List

from meeting_bot.config.settings import MeetingPlatform


# =============================================================================
# ZOOM (web client)
# =============================================================================

ZOOM_SELECTORS: Dict[str, List[str]] = {
    "name_input": [
        'input#input-for-name',
        'input#inputname',
        'input[type="text"]',
    ],
    "password_input": [
        'input#input-for-pwd',
        'input#inputpasscode',
        'input[type="password"]',
    ],
    "mic_toggle": [
        'button#preview-audio-control-button[aria-label*="Mute"]',
        'button[aria-label="Mute"]',
    ],
    "camera_toggle": [
        'button#preview-video-control-button[aria-label*="Stop"]',
        'button[aria-label="Stop Video"]',
    ],
    "join_button": [
        'button.preview-join-button',
        'button#joinBtn',
        'button[class*="join"]',
    ],
    "in_meeting": [
        'button[aria-label*="Leave"]',
        'button[title*="Leave"]',
        '[class*="footer-button"]',
    ],
}


# =============================================================================
# GOOGLE MEET
# =============================================================================

MEET_SELECTORS: Dict[str, List[str]] = {
    "dismiss_popup": [
        'button[aria-label="Dismiss"]',
        'button:has-text("Got it")',
    ],
    "name_input": [
        'input[placeholder*="name" i]',
        'input[aria-label="Your name"]',
    ],
    "camera_toggle": [
        'div[role="button"][aria-label*="Turn off camera" i]',
        'button[aria-label*="Turn off camera" i]',
    ],
    "mic_toggle": [
        'div[role="button"][aria-label*="Turn off microphone" i]',
        'button[aria-label*="Turn off microphone" i]',
    ],
    "join_button": [
        'button[jsname="Qx7uuf"]',
        'button:has-text("Ask to join")',
        'button:has-text("Join now")',
    ],
    "in_meeting": [
        'button[aria-label*="Leave call"]',
        '[data-participant-id]',
    ],
}


# =============================================================================
# MICROSOFT TEAMS (web)
# =============================================================================

TEAMS_SELECTORS: Dict[str, List[str]] = {
    # "Continue on this browser" when Teams tries to open the desktop app
    "continue_browser": [
        'a[class*="use-web-client"]',
        '[data-tid="joinOnWeb"]',
        'button:has-text("Continue on this browser")',
        'a:has-text("Continue on this browser")',
    ],
    "name_input": [
        'input[data-tid="prejoin-display-name-input"]',
        '#prejoin-input-name',
        'input[placeholder*="name" i]',
    ],
    "camera_toggle": [
        'toggle-button[aria-label*="camera" i][aria-pressed="true"]',
        '[data-tid="toggle-video"][aria-checked="true"]',
        'input[title*="camera" i][checked]',
    ],
    "mic_toggle": [
        'toggle-button[aria-label*="mic" i][aria-pressed="true"]',
        '[data-tid="toggle-mute"][aria-checked="true"]',
        'input[title*="microphone" i][checked]',
    ],
    "join_button": [
        'button[data-tid="prejoin-join-button"]',
        'button[class*="join-btn"]',
        'button:has-text("Join now")',
    ],
    "in_meeting": [
        '[data-tid="hangup-main-btn"]',
        'button[aria-label*="Leave"]',
        '[data-tid="roster-list"]',
    ],
}


PLATFORM_SELECTORS: Dict[MeetingPlatform, Dict[str, List[str]]] = {
    MeetingPlatform.ZOOM: ZOOM_SELECTORS,
    MeetingPlatform.GOOGLE_MEET: MEET_SELECTORS,
    MeetingPlatform.TEAMS: TEAMS_SELECTORS,
}


def get_selectors_for(platform: MeetingPlatform, element_type: str) -> List[str]:
    """
    Get list of selectors for a specific element type.

    Args:
        platform: Meeting platform
        element_type: Key from the platform's selector table

    Returns:
        List of CSS selectors to try
    """
    return PLATFORM_SELECTORS[platform].get(element_type, [])


def get_selector(platform: MeetingPlatform, element_type: str) -> str:
    """
    Combine the alternatives for an element into one selector list.

    Raises:
        KeyError: if the platform has no selectors for element_type.
    """
    selectors = get_selectors_for(platform, element_type)
    if not selectors:
        raise KeyError(f"No selectors for {platform.value}.{element_type}")
    return ", ".join(selectors)

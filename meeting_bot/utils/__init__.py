"""
Utility functions for the Meeting Bot.
"""

from .url_extractor import (
    parse_platform,
    extract_meeting_id,
    detect_platform_from_url,
    url_origin,
)

__all__ = [
    "parse_platform",
    "extract_meeting_id",
    "detect_platform_from_url",
    "url_origin",
]

"""
Audio capture and relay module.
"""

from .audio_relay import AudioRelay, AudioChunk
from .audio_scripts import build_audio_tap_script

__all__ = ["AudioRelay", "AudioChunk", "build_audio_tap_script"]

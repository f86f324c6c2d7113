"""
Configuration settings for the Meeting Bot.
Browser, relay, transcription endpoint and scheduler settings.
"""

from typing import List
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from enum import Enum
from dateutil import tz


class MeetingPlatform(str, Enum):
    """Supported meeting platforms."""
    ZOOM = "zoom"
    GOOGLE_MEET = "google_meet"
    TEAMS = "teams"


class TranscriptionSettings(BaseSettings):
    """External transcription endpoint that receives relayed audio."""
    model_config = SettingsConfigDict(env_prefix="TRANSCRIPTION_")

    service_url: str = Field(default="http://localhost:4000", description="Transcription service base URL")
    relay_path: str = Field(default="/transcribe", description="Path receiving audio chunks")
    timeout_seconds: float = Field(default=10.0, description="Per-chunk request timeout")


class RelaySettings(BaseSettings):
    """In-page audio relay configuration."""
    model_config = SettingsConfigDict(env_prefix="RELAY_")

    chunk_size: int = Field(default=4096, description="Samples per forwarded chunk")
    binding_name: str = Field(default="__meetingBotAudio", description="Page-to-host binding name")
    max_in_flight: int = Field(default=32, description="Pending deliveries per meeting before dropping")

    @field_validator("chunk_size")
    @classmethod
    def validate_chunk_size(cls, v: int) -> int:
        # ScriptProcessorNode only accepts these buffer sizes
        if v < 256 or v > 16384 or v & (v - 1):
            raise ValueError(f"Invalid chunk size: {v} (power of two between 256 and 16384)")
        return v


class BrowserSettings(BaseSettings):
    """Headless browser configuration."""
    model_config = SettingsConfigDict(env_prefix="BROWSER_")

    headless: bool = Field(default=True, description="Run Chromium headless")
    step_timeout_ms: int = Field(default=10000, description="Timeout for a single join step")
    navigation_timeout_ms: int = Field(default=30000, description="Timeout for page navigation")
    user_agent: str = Field(
        default="Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="User agent presented to meeting platforms",
    )
    extra_args: List[str] = Field(default_factory=list, description="Additional Chromium flags")


class BotSettings(BaseSettings):
    """Bot behavior configuration."""
    model_config = SettingsConfigDict(env_prefix="BOT_")

    default_bot_name: str = Field(default="Verba AI Notetaker", description="Default bot name")
    admission_timeout_seconds: int = Field(default=600, description="Max lobby wait (seconds)")


class SchedulerSettings(BaseSettings):
    """Deferred join configuration."""
    model_config = SettingsConfigDict(env_prefix="SCHEDULER_")

    misfire_grace_seconds: int = Field(default=300, description="Grace period for late jobs")
    immediate_delay_seconds: int = Field(default=5, description="Delay used when the time already passed")


class ApiSettings(BaseSettings):
    """HTTP server configuration."""
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=5001, description="Bind port")


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

    # Nested settings
    transcription: TranscriptionSettings = Field(default_factory=TranscriptionSettings)
    relay: RelaySettings = Field(default_factory=RelaySettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    bot: BotSettings = Field(default_factory=BotSettings)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)

    # Application settings
    project_name: str = Field(default="Meeting Bot", description="Service name")
    version: str = Field(default="1.0.0", description="Service version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_to_file: bool = Field(default=True, description="Write rotating log files under logs/")
    timezone: str = Field(default="auto", description="Timezone (or 'auto')")

    # Enabled platforms
    enabled_platforms: List[MeetingPlatform] = Field(
        default=[
            MeetingPlatform.ZOOM,
            MeetingPlatform.GOOGLE_MEET,
            MeetingPlatform.TEAMS,
        ],
        description="Enabled meeting platforms"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()

    @property
    def tz_info(self):
        """Get timezone info (auto-detected if 'auto')."""
        if self.timezone.lower() == "auto":
            return tz.tzlocal()
        return tz.gettz(self.timezone) or tz.UTC


# Global settings instance
settings = Settings()

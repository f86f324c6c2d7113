"""
Audio relay: forwards audio captured inside meeting pages to the
transcription service.

Each chunk is delivered in its own task. A failed delivery is logged and
counted; it never delays the next chunk and never changes session state.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set

import httpx

from meeting_bot.config import settings, get_logger
from meeting_bot.config.settings import RelaySettings, TranscriptionSettings
from meeting_bot.core.exceptions import RelayDeliveryFailure
from .audio_scripts import CONSOLE_PREFIX, build_audio_tap_script

logger = get_logger("audio_relay")

BYTES_PER_SAMPLE = 4  # float32


@dataclass
class AudioChunk:
    """One decoded buffer of mono float32 little-endian samples."""
    meeting_id: str
    sequence: int
    samples: bytes
    sample_rate: int
    captured_at: int  # ms since epoch, page clock

    @property
    def sample_count(self) -> int:
        return len(self.samples) // BYTES_PER_SAMPLE

    def to_payload(self) -> dict:
        return {
            "meetingId": self.meeting_id,
            "sequence": self.sequence,
            "audioData": base64.b64encode(self.samples).decode("ascii"),
            "encoding": "float32le",
            "sampleRate": self.sample_rate,
            "sampleCount": self.sample_count,
            "timestamp": self.captured_at,
        }


@dataclass
class _RelayChannel:
    meeting_id: str
    handle: Any = None
    started: bool = False
    sequence: int = 0
    forwarded: int = 0
    failed: int = 0
    dropped: int = 0
    pending: Set[asyncio.Task] = field(default_factory=set)


class AudioRelay:
    """
    Host side of the audio bridge.

    Usage pattern:
        await relay.attach(handle, meeting_id)   # before navigation
        ... join ...
        relay.start(meeting_id)                  # session active
        ...
        await relay.detach(meeting_id)
    """

    def __init__(
        self,
        relay_settings: Optional[RelaySettings] = None,
        transcription_settings: Optional[TranscriptionSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = relay_settings or settings.relay
        self._transcription = transcription_settings or settings.transcription
        self._client = http_client
        self._channels: Dict[str, _RelayChannel] = {}

    @property
    def chunk_size(self) -> int:
        return self._settings.chunk_size

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._transcription.service_url,
                headers={"Content-Type": "application/json"},
                timeout=self._transcription.timeout_seconds,
            )
        return self._client

    async def attach(self, handle: Any, meeting_id: str) -> None:
        """
        Install the tap script and the page-to-host binding on a handle.
        Must run before the meeting page is loaded.
        """
        channel = _RelayChannel(meeting_id=meeting_id, handle=handle)
        self._channels[meeting_id] = channel

        # Bound to this channel so a stale page never feeds a newer session
        async def _on_chunk(payload: dict) -> None:
            self._accept(channel, payload)

        await handle.expose_binding(self._settings.binding_name, _on_chunk)
        await handle.inject_on_load(build_audio_tap_script(self._settings.binding_name, self.chunk_size))
        handle.on_console_message(
            lambda text: text.startswith(CONSOLE_PREFIX),
            lambda text: logger.debug(f"[{meeting_id}] {text}"),
        )
        logger.info(f"Audio relay attached for {meeting_id} ({self.chunk_size} samples/chunk)")

    def start(self, meeting_id: str) -> None:
        """Begin forwarding chunks for an active session."""
        channel = self._channels.get(meeting_id)
        if channel is None:
            logger.warning(f"Cannot start relay for {meeting_id}: not attached")
            return
        channel.started = True
        logger.info(f"Audio relay started for {meeting_id}")

    async def detach(self, meeting_id: str, handle: Any = None) -> None:
        """
        Stop forwarding and cancel deliveries still in flight.

        When a handle is given, only the channel attached to that handle is
        detached.
        """
        channel = self._channels.get(meeting_id)
        if channel is None or (handle is not None and channel.handle is not handle):
            return
        del self._channels[meeting_id]
        channel.started = False
        pending = list(channel.pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        logger.info(
            f"Audio relay detached for {meeting_id}: forwarded={channel.forwarded} "
            f"failed={channel.failed} dropped={channel.dropped}"
        )

    def stats(self, meeting_id: str) -> Dict[str, int]:
        channel = self._channels.get(meeting_id)
        if channel is None:
            return {}
        return {
            "forwarded": channel.forwarded,
            "failed": channel.failed,
            "dropped": channel.dropped,
            "in_flight": len(channel.pending),
        }

    def receive(self, meeting_id: str, payload: dict) -> Optional[asyncio.Task]:
        """
        Accept a chunk posted by the page and schedule its delivery.

        Returns:
            The delivery task, or None if the chunk was dropped.
        """
        channel = self._channels.get(meeting_id)
        if channel is None:
            return None
        return self._accept(channel, payload)

    def _accept(self, channel: _RelayChannel, payload: dict) -> Optional[asyncio.Task]:
        if not channel.started:
            return None

        chunk = self._decode(channel, payload)
        if chunk is None:
            channel.dropped += 1
            return None

        if len(channel.pending) >= self._settings.max_in_flight:
            channel.dropped += 1
            logger.debug(f"Relay backlog full for {channel.meeting_id}; dropping chunk {chunk.sequence}")
            return None

        task = asyncio.create_task(self._deliver(channel, chunk))
        channel.pending.add(task)
        task.add_done_callback(channel.pending.discard)
        return task

    def _decode(self, channel: _RelayChannel, payload: dict) -> Optional[AudioChunk]:
        try:
            samples = base64.b64decode(payload["audio"], validate=True)
            sample_rate = int(payload.get("sampleRate", 0))
            captured_at = int(payload.get("timestamp") or datetime.now(timezone.utc).timestamp() * 1000)
        except (KeyError, TypeError, ValueError, binascii.Error) as e:
            logger.warning(f"Malformed audio chunk for {channel.meeting_id}: {e}")
            return None

        if len(samples) != self.chunk_size * BYTES_PER_SAMPLE:
            logger.warning(
                f"Audio chunk for {channel.meeting_id} has {len(samples) // BYTES_PER_SAMPLE} samples, "
                f"expected {self.chunk_size}"
            )
            return None

        channel.sequence += 1
        return AudioChunk(
            meeting_id=channel.meeting_id,
            sequence=channel.sequence,
            samples=samples,
            sample_rate=sample_rate,
            captured_at=captured_at,
        )

    async def _deliver(self, channel: _RelayChannel, chunk: AudioChunk) -> None:
        try:
            try:
                response = await self._get_client().post(
                    self._transcription.relay_path,
                    json=chunk.to_payload(),
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise RelayDeliveryFailure(
                    f"Chunk {chunk.sequence} for {chunk.meeting_id} not delivered: {e}",
                    {"meeting_id": chunk.meeting_id, "sequence": chunk.sequence},
                ) from e
        except RelayDeliveryFailure as failure:
            channel.failed += 1
            logger.warning(failure.message)
            return
        channel.forwarded += 1

    async def close(self) -> None:
        """Detach every meeting and close the HTTP client."""
        for meeting_id in list(self._channels):
            await self.detach(meeting_id)
        if self._client is not None:
            await self._client.aclose()
            self._client = None

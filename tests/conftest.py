"""Pytest configuration and fixtures."""

import asyncio
import base64
import json
import os
import struct
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

# Set test environment variables before the package reads its settings
os.environ["LOG_TO_FILE"] = "false"
os.environ["TRANSCRIPTION_SERVICE_URL"] = "http://transcriber.test"

from meeting_bot.config.settings import RelaySettings, TranscriptionSettings  # noqa: E402
from meeting_bot.core.exceptions import DriverCrashError, DriverError, DriverTimeoutError  # noqa: E402
from meeting_bot.meeting_handler.meeting_orchestrator import MeetingOrchestrator  # noqa: E402
from meeting_bot.recording.audio_relay import AudioRelay  # noqa: E402
from meeting_bot.scheduler.meeting_scheduler import MeetingScheduler  # noqa: E402


CHUNK_SIZE = 256


def make_chunk_payload(samples=CHUNK_SIZE, timestamp=1700000000000):
    """A chunk as posted by the in-page audio tap."""
    pcm = struct.pack(f"<{samples}f", *([0.25] * samples))
    return {
        "audio": base64.b64encode(pcm).decode("ascii"),
        "sampleRate": 48000,
        "sampleCount": samples,
        "timestamp": timestamp,
    }


class FakeHandle:
    """Records driver calls instead of driving a browser."""

    def __init__(
        self,
        origin: str,
        fail_on: Optional[str] = None,
        fail_with: str = "timeout",
        gate: Optional[asyncio.Event] = None,
    ):
        self.origin = origin
        self.fail_on = fail_on
        self.fail_with = fail_with
        self.gate = gate
        self.waiting = asyncio.Event()
        self.calls: List[Tuple[str, str]] = []
        self.typed: Dict[str, str] = {}
        self.bindings: Dict[str, Callable[..., Any]] = {}
        self.init_scripts: List[str] = []
        self.console_listeners: List[Tuple[Callable, Callable]] = []
        self.crash_callbacks: List[Callable] = []
        self.close_calls = 0
        self.is_closed = False
        self.has_crashed = False

    async def _step(self, op: str, target: str) -> None:
        self.calls.append((op, target))
        if op == "wait" and self.gate is not None:
            self.waiting.set()
            await self.gate.wait()
        if self.fail_on and self.fail_on in target:
            if self.fail_with == "timeout":
                raise DriverTimeoutError(f"{op} {target} timed out")
            if self.fail_with == "crash":
                raise DriverCrashError(f"{op} {target}: browser died")
            raise DriverError(f"{op} {target} failed")

    async def navigate(self, url, timeout=None):
        await self._step("navigate", url)

    async def wait_for_element(self, selector, timeout=None):
        await self._step("wait", selector)
        return object()

    async def type_text(self, selector, text, timeout=None):
        await self._step("type", selector)
        self.typed[selector] = text

    async def click(self, selector, timeout=None):
        await self._step("click", selector)

    async def inject_on_load(self, script):
        self.init_scripts.append(script)

    async def expose_binding(self, name, callback):
        self.bindings[name] = callback

    def on_console_message(self, predicate, callback):
        self.console_listeners.append((predicate, callback))

    def on_crash(self, callback):
        self.crash_callbacks.append(callback)

    async def crash(self, reason: str = "browser disconnected") -> None:
        self.has_crashed = True
        for callback in self.crash_callbacks:
            result = callback(reason)
            if asyncio.iscoroutine(result):
                await result

    async def close(self):
        self.close_calls += 1
        await asyncio.sleep(0)
        self.is_closed = True


class FakeDriver:
    """Hands out FakeHandles; handle_options apply to every launch."""

    def __init__(self):
        self.handles: List[FakeHandle] = []
        self.handle_options: Dict[str, Any] = {}
        self.launch_error: Optional[Exception] = None
        self.started = False
        self.stopped = False

    async def start(self):
        self.started = True

    async def stop(self):
        self.stopped = True

    async def launch(self, media_permissions_for: str) -> FakeHandle:
        if self.launch_error is not None:
            raise self.launch_error
        handle = FakeHandle(media_permissions_for, **self.handle_options)
        self.handles.append(handle)
        return handle


class TranscriberStub:
    """httpx transport standing in for the transcription service."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.fail_sequences: set = set()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = json.loads(request.content)
        if body.get("sequence") in self.fail_sequences:
            return httpx.Response(503, json={"error": "unavailable"})
        return httpx.Response(200, json={"ok": True})


@pytest.fixture
def fake_driver():
    return FakeDriver()


@pytest.fixture
def transcriber():
    return TranscriberStub()


@pytest.fixture
def relay(transcriber):
    client = httpx.AsyncClient(
        base_url="http://transcriber.test",
        transport=httpx.MockTransport(transcriber.handler),
    )
    return AudioRelay(
        relay_settings=RelaySettings(chunk_size=CHUNK_SIZE),
        transcription_settings=TranscriptionSettings(service_url="http://transcriber.test"),
        http_client=client,
    )


@pytest.fixture
def orchestrator(fake_driver, relay):
    return MeetingOrchestrator(
        driver=fake_driver,
        relay=relay,
        scheduler=MeetingScheduler(),
    )

"""Tests for the Playwright driver handle, with Playwright objects mocked."""

from unittest.mock import AsyncMock, MagicMock

import asyncio
import logging

import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from meeting_bot.core.exceptions import DriverCrashError, DriverError, DriverTimeoutError
from meeting_bot.meeting_handler.browser_driver import BrowserSessionDriver, DriverHandle


def make_handle(connected=True):
    browser = MagicMock()
    browser.is_connected.return_value = connected
    browser.close = AsyncMock()
    context = MagicMock()
    context.close = AsyncMock()
    context.add_init_script = AsyncMock()
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.fill = AsyncMock()
    page.click = AsyncMock()
    page.expose_function = AsyncMock()
    return DriverHandle(browser, context, page, "https://zoom.us")


def registered_listener(mock_emitter, event):
    for call in mock_emitter.on.call_args_list:
        if call.args[0] == event:
            return call.args[1]
    raise AssertionError(f"no listener for {event}")


class TestDriverHandle:

    @pytest.mark.asyncio
    async def test_timeout_translated(self):
        handle = make_handle()
        handle.page.wait_for_selector.side_effect = PlaywrightTimeoutError("Timeout 10000ms exceeded")

        with pytest.raises(DriverTimeoutError):
            await handle.wait_for_element("button#join", timeout=10)

    @pytest.mark.asyncio
    async def test_other_error_translated(self):
        handle = make_handle()
        handle.page.click.side_effect = PlaywrightError("Element is not attached to the DOM")

        with pytest.raises(DriverError) as exc_info:
            await handle.click("button#join")
        assert not isinstance(exc_info.value, DriverCrashError)

    @pytest.mark.asyncio
    async def test_error_on_disconnected_browser_is_crash(self):
        handle = make_handle(connected=False)
        handle.page.goto.side_effect = PlaywrightError("Target page, context or browser has been closed")

        with pytest.raises(DriverCrashError):
            await handle.navigate("https://zoom.us/wc/join/1")

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        handle = make_handle()

        await handle.close()
        await handle.close()

        handle.context.close.assert_awaited_once()
        handle.browser.close.assert_awaited_once()
        with pytest.raises(DriverCrashError):
            await handle.click("button#join")

    def test_crash_callback_fires_once(self):
        handle = make_handle()
        reasons = []
        handle.on_crash(reasons.append)

        on_disconnect = registered_listener(handle.browser, "disconnected")
        on_disconnect(handle.browser)
        on_disconnect(handle.browser)

        assert handle.has_crashed
        assert reasons == ["browser disconnected"]

    @pytest.mark.asyncio
    async def test_async_crash_callback_is_kept_and_awaited(self, caplog):
        handle = make_handle()
        cleaned = asyncio.Event()

        async def cleanup(reason):
            cleaned.set()

        async def broken_cleanup(reason):
            raise RuntimeError("teardown exploded")

        handle.on_crash(cleanup)
        handle.on_crash(broken_cleanup)

        registered_listener(handle.page, "crash")(handle.page)
        assert len(handle._crash_tasks) == 2

        with caplog.at_level(logging.ERROR, logger="meeting_bot"):
            await asyncio.gather(*list(handle._crash_tasks), return_exceptions=True)
            await asyncio.sleep(0)

        assert cleaned.is_set()
        assert handle._crash_tasks == set()
        assert "teardown exploded" in caplog.text

    @pytest.mark.asyncio
    async def test_close_does_not_report_crash(self):
        handle = make_handle()
        reasons = []
        handle.on_crash(reasons.append)

        await handle.close()
        registered_listener(handle.page, "close")(handle.page)

        assert reasons == []

    def test_console_filter(self):
        handle = make_handle()
        seen = []
        handle.on_console_message(lambda text: text.startswith("[meeting-bot]"), seen.append)

        listener = registered_listener(handle.page, "console")
        listener(MagicMock(text="[meeting-bot] tap attached"))
        listener(MagicMock(text="zoom telemetry"))

        assert seen == ["[meeting-bot] tap attached"]


class TestBrowserSessionDriver:

    @pytest.mark.asyncio
    async def test_launch_failure_becomes_driver_error(self):
        driver = BrowserSessionDriver()
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(side_effect=PlaywrightError("Executable doesn't exist"))
        driver._playwright = playwright

        with pytest.raises(DriverError):
            await driver.launch("https://zoom.us")

    @pytest.mark.asyncio
    async def test_launch_grants_media_to_origin(self):
        driver = BrowserSessionDriver()
        context = MagicMock()
        context.grant_permissions = AsyncMock()
        context.add_init_script = AsyncMock()
        context.new_page = AsyncMock(return_value=MagicMock())
        browser = MagicMock()
        browser.new_context = AsyncMock(return_value=context)
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(return_value=browser)
        driver._playwright = playwright

        handle = await driver.launch("https://meet.google.com")

        context.grant_permissions.assert_awaited_once_with(["microphone", "camera"], origin="https://meet.google.com")
        assert handle.origin == "https://meet.google.com"

"""
Playwright browser session driver.

One DriverHandle wraps one dedicated Chromium process, one context and one
page. Handles are never shared between meeting sessions. All Playwright
errors leave this module translated into the DriverError family:

- DriverTimeoutError: a wait/navigation did not complete within its bound
- DriverCrashError: the browser or page is gone
- DriverError: anything else Playwright raised
"""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from typing import Any, Awaitable, Callable, List, Optional, Set, Union

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    ConsoleMessage,
    Error as PlaywrightError,
    TimeoutError as PlaywrightTimeoutError,
)

from meeting_bot.config import settings, get_logger
from meeting_bot.config.settings import BrowserSettings
from meeting_bot.core.exceptions import DriverError, DriverTimeoutError, DriverCrashError


logger = get_logger("browser_driver")

CrashCallback = Callable[[str], Union[None, Awaitable[None]]]

# Chromium flags: fake media devices so no hardware is needed, and no
# automation banner.
LAUNCH_ARGS = [
    "--use-fake-ui-for-media-stream",
    "--use-fake-device-for-media-stream",
    "--autoplay-policy=no-user-gesture-required",
    "--disable-blink-features=AutomationControlled",
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-infobars",
]

CLOSE_TIMEOUT_SECONDS = 10


class DriverHandle:
    """
    Exclusive handle on one browser instance and its top-level page.

    Operations are sequential per handle; the owning session awaits each one
    before issuing the next.
    """

    def __init__(self, browser: Browser, context: BrowserContext, page: Page, origin: str):
        self.browser = browser
        self.context = context
        self.page = page
        self.origin = origin
        self._closed = False
        self._crashed = False
        self._crash_callbacks: List[CrashCallback] = []
        self._crash_tasks: Set[asyncio.Task] = set()

        browser.on("disconnected", lambda _: self._handle_crash("browser disconnected"))
        page.on("crash", lambda _: self._handle_crash("page crashed"))
        page.on("close", lambda _: self._handle_crash("page closed"))

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def has_crashed(self) -> bool:
        return self._crashed

    @contextmanager
    def _translate_errors(self, action: str):
        if self._closed or self._crashed:
            raise DriverCrashError(f"{action}: browser is no longer available", {"action": action})
        try:
            yield
        except PlaywrightTimeoutError as e:
            raise DriverTimeoutError(f"{action} timed out", {"action": action, "error": str(e)}) from e
        except PlaywrightError as e:
            msg = str(e)
            if self._crashed or "has been closed" in msg or not self.browser.is_connected():
                raise DriverCrashError(f"{action}: browser died ({msg})", {"action": action}) from e
            raise DriverError(f"{action} failed: {msg}", {"action": action}) from e

    async def navigate(self, url: str, timeout: Optional[int] = None) -> None:
        """Navigate the page and wait for the DOM to be ready."""
        timeout = timeout or settings.browser.navigation_timeout_ms
        with self._translate_errors(f"navigate to {url}"):
            await self.page.goto(url, wait_until="domcontentloaded", timeout=timeout)

    async def wait_for_element(self, selector: str, timeout: Optional[int] = None) -> Any:
        """
        Wait until the selector is visible.

        Raises:
            DriverTimeoutError: if nothing matches within the timeout.
        """
        timeout = timeout or settings.browser.step_timeout_ms
        with self._translate_errors(f"wait for {selector}"):
            return await self.page.wait_for_selector(selector, state="visible", timeout=timeout)

    async def type_text(self, selector: str, text: str, timeout: Optional[int] = None) -> None:
        """Replace the content of an input with text."""
        timeout = timeout or settings.browser.step_timeout_ms
        with self._translate_errors(f"type into {selector}"):
            await self.page.fill(selector, text, timeout=timeout)

    async def click(self, selector: str, timeout: Optional[int] = None) -> None:
        timeout = timeout or settings.browser.step_timeout_ms
        with self._translate_errors(f"click {selector}"):
            await self.page.click(selector, timeout=timeout)

    async def inject_on_load(self, script: str) -> None:
        """Run script in every document before the page's own scripts."""
        with self._translate_errors("inject init script"):
            await self.context.add_init_script(script)

    async def expose_binding(self, name: str, callback: Callable[..., Any]) -> None:
        """Expose a host callback as window[name] inside the page."""
        with self._translate_errors(f"expose {name}"):
            await self.page.expose_function(name, callback)

    def on_console_message(self, predicate: Callable[[str], bool], callback: Callable[[str], Any]) -> None:
        """Call callback(text) for every console message whose text satisfies predicate."""
        def _listener(msg: ConsoleMessage) -> None:
            text = msg.text
            if predicate(text):
                callback(text)

        self.page.on("console", _listener)

    def on_crash(self, callback: CrashCallback) -> None:
        """Register a callback fired once if the browser dies while the handle is open."""
        self._crash_callbacks.append(callback)

    def _handle_crash(self, reason: str) -> None:
        if self._closed or self._crashed:
            return
        self._crashed = True
        logger.warning(f"Browser for {self.origin} lost: {reason}")
        for callback in self._crash_callbacks:
            try:
                result = callback(reason)
                if asyncio.iscoroutine(result):
                    task = asyncio.ensure_future(result)
                    self._crash_tasks.add(task)
                    task.add_done_callback(self._crash_task_done)
            except Exception as e:
                logger.error(f"Crash callback error: {e}")

    def _crash_task_done(self, task: asyncio.Task) -> None:
        self._crash_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Crash cleanup for {self.origin} failed: {task.exception()}")

    async def close(self) -> None:
        """
        Release the browser. Safe to call more than once and on a crashed
        browser.
        """
        if self._closed:
            return
        self._closed = True

        try:
            await asyncio.wait_for(self.context.close(), timeout=CLOSE_TIMEOUT_SECONDS)
        except (PlaywrightError, asyncio.TimeoutError) as e:
            logger.debug(f"Context close error (ignored): {e}")

        try:
            await asyncio.wait_for(self.browser.close(), timeout=CLOSE_TIMEOUT_SECONDS)
        except (PlaywrightError, asyncio.TimeoutError) as e:
            logger.warning(f"Browser close error for {self.origin}: {e}")

        logger.info(f"Browser closed for {self.origin}")


class BrowserSessionDriver:
    """
    Owns the Playwright runtime and launches one browser per session.

    Usage pattern:
        driver = BrowserSessionDriver()
        handle = await driver.launch("https://zoom.us")
        ...
        await handle.close()
        await driver.stop()
    """

    def __init__(self, browser_settings: Optional[BrowserSettings] = None) -> None:
        self._settings = browser_settings or settings.browser
        self._playwright = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        """Return True if the Playwright runtime is started."""
        return self._playwright is not None

    async def start(self) -> None:
        """Start Playwright. Browsers are launched per session."""
        async with self._lock:
            if self._playwright is not None:
                return
            logger.info("Starting Playwright runtime...")
            self._playwright = await async_playwright().start()
            logger.info("Playwright runtime started.")

    async def stop(self) -> None:
        """Stop the Playwright runtime."""
        async with self._lock:
            if self._playwright is None:
                return
            logger.info("Stopping Playwright runtime...")
            try:
                await self._playwright.stop()
            finally:
                self._playwright = None

    async def launch(self, media_permissions_for: str) -> DriverHandle:
        """
        Launch a dedicated browser with microphone/camera granted to an origin.

        Args:
            media_permissions_for: Origin (scheme://host) of the meeting page.

        Returns:
            A fresh DriverHandle.
        """
        if self._playwright is None:
            await self.start()

        browser = None
        try:
            browser = await self._playwright.chromium.launch(
                headless=self._settings.headless,
                ignore_default_args=["--enable-automation"],
                args=LAUNCH_ARGS + list(self._settings.extra_args),
            )
            context = await browser.new_context(
                user_agent=self._settings.user_agent,
                viewport={"width": 1280, "height": 720},
                ignore_https_errors=True,
            )
            await context.grant_permissions(["microphone", "camera"], origin=media_permissions_for)
            await context.add_init_script("Object.defineProperty(navigator, 'webdriver', {get: () => undefined})")
            page = await context.new_page()
        except PlaywrightError as e:
            if browser is not None:
                try:
                    await browser.close()
                except PlaywrightError:
                    logger.debug("Browser close after failed launch raised; ignoring")
            raise DriverError(f"Browser launch failed: {e}", {"origin": media_permissions_for}) from e

        logger.info(f"Browser launched for {media_permissions_for}")
        return DriverHandle(browser, context, page, media_permissions_for)

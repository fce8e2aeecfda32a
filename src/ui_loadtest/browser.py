"""
Browser lifecycle for a run: start Playwright, launch Chromium, shut down.
"""

import logging
import os
from typing import Any, List, Optional, Sequence

from playwright.async_api import Error as PlaywrightError, async_playwright

from .common.errors import describe_error
from .exceptions import BrowserLaunchError

log = logging.getLogger(__name__)


class BrowserLauncher:
    """
    Launches Chromium, falling back to locally installed executables.

    The Playwright-managed browser is tried first, then every path in
    ``executable_paths`` that exists, in order. Provides an async context
    manager interface for guaranteed cleanup:

        async with BrowserLauncher(headless=True) as browser:
            context = await browser.new_context()
    """

    def __init__(
        self,
        headless: bool = True,
        executable_paths: Optional[Sequence[str]] = None,
        launch_args: Optional[Sequence[str]] = None,
    ):
        self.headless = headless
        self.executable_paths = list(executable_paths or [])
        self.launch_args = list(launch_args or [])
        self._playwright = None
        self.browser: Any = None

    async def start(self) -> Any:
        """
        Start Playwright and launch a browser.

        Raises:
            BrowserLaunchError: If no browser could be launched
        """
        try:
            self._playwright = await async_playwright().start()
        except Exception as e:
            raise BrowserLaunchError([f"playwright driver: {describe_error(e)}"]) from e

        try:
            self.browser = await self._launch()
        except BaseException:
            await self._stop_playwright()
            raise
        return self.browser

    async def _launch(self) -> Any:
        options = {"headless": self.headless, "args": self.launch_args}
        attempts: List[str] = []

        try:
            browser = await self._playwright.chromium.launch(**options)
            log.info("Launched Playwright-managed Chromium (headless=%s).", self.headless)
            return browser
        except PlaywrightError as e:
            log.warning("Playwright-managed browser launch failed: %s", describe_error(e))
            attempts.append(f"managed chromium: {describe_error(e)}")

        for path in self.executable_paths:
            if not os.path.exists(path):
                attempts.append(f"{path}: not found")
                continue
            try:
                browser = await self._playwright.chromium.launch(executable_path=path, **options)
                log.info("Launched browser from %s.", path)
                return browser
            except PlaywrightError as e:
                log.warning("Browser launch from %s failed: %s", path, describe_error(e))
                attempts.append(f"{path}: {describe_error(e)}")

        raise BrowserLaunchError(attempts)

    async def stop(self):
        """Close the browser and stop Playwright; errors are logged, not raised."""
        if self.browser is not None:
            try:
                await self.browser.close()
            except Exception as e:
                log.warning("Error during browser.close(): %s", describe_error(e))
            self.browser = None
        await self._stop_playwright()

    async def _stop_playwright(self):
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                log.warning("Error stopping Playwright: %s", describe_error(e))
            self._playwright = None

    async def __aenter__(self):
        return await self.start()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()
        return False

"""
Shared fixtures for unit tests.

Provides an in-memory stand-in for a Playwright page, context and browser so
pipelines and the orchestrator can be exercised without launching Chromium.
"""

import asyncio
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ui_loadtest.config import LoadTestConfig, StepTimeouts


class FakeLocator:
    """Locator returning no elements unless told otherwise."""

    def __init__(self, page: "FakePage", selector: str):
        self.page = page
        self.selector = selector

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(self.page, f"{self.selector} >> {selector}")

    @property
    def first(self) -> "FakeLocator":
        return self

    async def all(self) -> List[Any]:
        return list(self.page.elements.get(self.selector, []))

    async def count(self) -> int:
        return len(self.page.elements.get(self.selector, []))

    async def click(self, timeout: Optional[float] = None):
        self.page.calls.append(("locator.click", self.selector))
        error = self.page.failures.get(("locator.click", self.selector))
        if error is not None:
            raise error

    async def fill(self, value: str, timeout: Optional[float] = None):
        self.page.calls.append(("locator.fill", self.selector))


class FakePage:
    """
    Minimal async page.

    ``failures`` maps a method name (or ``(method, selector)``) to an
    exception to raise. ``selector_delays`` maps a selector to the seconds
    ``wait_for_selector`` takes; selectors in ``missing_selectors`` never
    appear and time out. ``on_click`` maps a selector to a callback run when
    it is clicked.
    """

    def __init__(self):
        self.handlers: Dict[str, List[Callable]] = {}
        self.calls: List[tuple] = []
        self.failures: Dict[Any, Exception] = {}
        self.selector_delays: Dict[str, float] = {}
        self.missing_selectors: set = set()
        self.on_click: Dict[str, Callable[["FakePage"], None]] = {}
        self.elements: Dict[str, List[Any]] = {}

    def on(self, event: str, handler: Callable):
        self.handlers.setdefault(event, []).append(handler)

    def emit_console(self, text: str):
        for handler in self.handlers.get("console", []):
            handler(SimpleNamespace(text=text))

    def emit_console_later(self, text: str, delay: float):
        async def _emit():
            await asyncio.sleep(delay)
            self.emit_console(text)

        return asyncio.get_running_loop().create_task(_emit())

    def _maybe_fail(self, method: str, selector: Optional[str] = None):
        error = self.failures.get((method, selector)) or self.failures.get(method)
        if error is not None:
            raise error

    async def goto(self, url: str, wait_until: Optional[str] = None, timeout: Optional[float] = None):
        self.calls.append(("goto", url))
        self._maybe_fail("goto", url)

    async def fill(self, selector: str, value: str, timeout: Optional[float] = None):
        self.calls.append(("fill", selector))
        self._maybe_fail("fill", selector)

    async def click(self, selector: str, timeout: Optional[float] = None):
        self.calls.append(("click", selector))
        self._maybe_fail("click", selector)
        callback = self.on_click.get(selector)
        if callback is not None:
            callback(self)

    async def wait_for_url(self, url: str, timeout: Optional[float] = None):
        self.calls.append(("wait_for_url", url))
        self._maybe_fail("wait_for_url", url)

    async def wait_for_selector(self, selector: str, state: Optional[str] = None, timeout: Optional[float] = None):
        self.calls.append(("wait_for_selector", selector))
        self._maybe_fail("wait_for_selector", selector)
        if selector in self.missing_selectors:
            await asyncio.sleep((timeout or 0) / 1000)
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector}")
        await asyncio.sleep(self.selector_delays.get(selector, 0))

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(self, selector)


class FakeContext:
    def __init__(self, page: FakePage, fail_new_page: Optional[Exception] = None):
        self.page = page
        self.fail_new_page = fail_new_page
        self.closed = False

    async def new_page(self) -> FakePage:
        if self.fail_new_page is not None:
            raise self.fail_new_page
        return self.page

    async def close(self):
        self.closed = True


class FakeBrowser:
    def __init__(self, pages: List[FakePage], context_failures: Optional[Dict[int, Exception]] = None):
        self.pages = pages
        self.context_failures = context_failures or {}
        self.contexts: List[FakeContext] = []

    async def new_context(self) -> FakeContext:
        index = len(self.contexts)
        context = FakeContext(self.pages[index], fail_new_page=self.context_failures.get(index))
        self.contexts.append(context)
        return context


class FakeLauncher:
    def __init__(self, browser: Optional[FakeBrowser] = None, error: Optional[Exception] = None):
        self.browser = browser
        self.error = error
        self.started = False
        self.stopped = False

    async def start(self):
        if self.error is not None:
            raise self.error
        self.started = True
        return self.browser

    async def stop(self):
        self.stopped = True


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def fakes() -> SimpleNamespace:
    """Access to the fake classes from tests."""
    return SimpleNamespace(
        Page=FakePage,
        Context=FakeContext,
        Browser=FakeBrowser,
        Launcher=FakeLauncher,
    )


@pytest.fixture
def fast_config() -> LoadTestConfig:
    """Config with short timeouts, headless and non-interactive."""
    return LoadTestConfig(
        headless=True,
        interactive=False,
        interact=False,
        timeouts=StepTimeouts(
            navigation=200,
            login=200,
            affordance=200,
            race=300,
            structural=200,
            poll_interval=10,
            click=100,
            confirmation=100,
            settle=0,
        ),
    )

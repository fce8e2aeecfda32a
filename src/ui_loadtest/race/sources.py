"""
Concrete readiness observations: console-log polling and selector waiting.
"""

import asyncio
from typing import Any, Optional

from playwright.async_api import Error as PlaywrightError

from ..capture import CaptureBuffer, now_ms
from .detector import DetectionMethod, RaceOutcome


async def poll_capture_buffer(
    buffer: CaptureBuffer,
    marker: str,
    interval_ms: float = 50,
    timeout_ms: float = 25000,
) -> Optional[RaceOutcome]:
    """
    Scan ``buffer`` every ``interval_ms`` for a message containing ``marker``.

    The outcome carries the timestamp of the matching message, not the time
    the scan noticed it, so the polling interval does not inflate latency.
    Returns None once ``timeout_ms`` has passed without a match.
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000

    while True:
        message = buffer.find_first_matching(marker)
        if message is not None:
            return RaceOutcome(DetectionMethod.LOG, message.timestamp_ms)

        if loop.time() >= deadline:
            return None

        await asyncio.sleep(interval_ms / 1000)


async def wait_for_selector(
    page: Any,
    selector: str,
    timeout_ms: float = 20000,
) -> Optional[RaceOutcome]:
    """
    Wait until ``selector`` is attached to the page.

    Playwright timeouts and errors resolve to None instead of raising.
    """
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms)
    except PlaywrightError:
        return None
    return RaceOutcome(DetectionMethod.DOM, now_ms())

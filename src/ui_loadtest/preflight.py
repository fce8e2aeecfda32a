"""
Optional preflight: wait until the application answers before starting sessions.
"""

import asyncio
import logging
import time
from typing import Optional

import httpx

from .exceptions import AppUnavailableError

log = logging.getLogger(__name__)


async def wait_for_app(
    url: str,
    timeout: float = 60.0,
    poll_interval: float = 1.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    """
    Poll ``url`` until it responds with a status below 500.

    Returns:
        The HTTP status code of the first acceptable response

    Raises:
        AppUnavailableError: If the application does not answer within timeout
    """
    start_time = time.time()
    last_problem = "no response"

    async with httpx.AsyncClient(timeout=10.0, follow_redirects=True, transport=transport) as client:
        while time.time() - start_time < timeout:
            try:
                response = await client.get(url)
                if response.status_code < 500:
                    log.info("Application at %s answered with %s", url, response.status_code)
                    return response.status_code
                last_problem = f"HTTP {response.status_code}"
                log.debug("Application not ready: %s", last_problem)
            except httpx.ConnectError:
                last_problem = "connection refused"
                log.debug("Application not yet responding at %s", url)
            except httpx.TimeoutException:
                last_problem = "request timed out"
                log.debug("Application request to %s timed out", url)

            await asyncio.sleep(poll_interval)

    raise AppUnavailableError(f"Timeout waiting for {url} after {timeout}s ({last_problem})")

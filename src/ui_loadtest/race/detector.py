"""
First-of-N race over independent readiness observations.

Each observation is a zero-argument coroutine function that resolves to a
RaceOutcome when its signal fires, or to None when it gives up. The race
returns the first outcome that arrives before the overall deadline.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, List, Optional, Sequence

log = logging.getLogger(__name__)


class DetectionMethod(str, Enum):
    """Which signal decided that the UI was ready."""

    LOG = "log"
    DOM = "dom"


@dataclass(frozen=True)
class RaceOutcome:
    """Winning signal and the wall-clock time (ms) at which it fired."""

    method: DetectionMethod
    timestamp_ms: float


Observation = Callable[[], Awaitable[Optional[RaceOutcome]]]


async def _observe(observation: Observation) -> Optional[RaceOutcome]:
    try:
        return await observation()
    except asyncio.CancelledError:
        raise
    except Exception as e:
        log.debug("Observation %r failed, treating as no result: %s", observation, e)
        return None


async def race_signals(
    observations: Sequence[Observation],
    deadline_ms: float,
) -> Optional[RaceOutcome]:
    """
    Run every observation concurrently and return the first outcome.

    An observation that raises or resolves to None never wins; the race keeps
    waiting for the others. Returns None when the deadline passes or every
    observation finished without an outcome. Observations still running when
    the race ends are cancelled.

    Args:
        observations: Zero-argument coroutine functions to race
        deadline_ms: Overall deadline in milliseconds

    Returns:
        The winning RaceOutcome, or None on timeout
    """
    tasks: List[asyncio.Task] = [
        asyncio.create_task(_observe(observation)) for observation in observations
    ]
    if not tasks:
        return None

    loop = asyncio.get_running_loop()
    deadline = loop.time() + deadline_ms / 1000
    pending = set(tasks)

    try:
        while pending:
            remaining = deadline - loop.time()
            if remaining <= 0:
                break

            done, pending = await asyncio.wait(
                pending,
                timeout=remaining,
                return_when=asyncio.FIRST_COMPLETED,
            )

            # Keep submission order among tasks that completed in the same wakeup.
            for task in tasks:
                if task in done and task.result() is not None:
                    return task.result()

        return None

    finally:
        unfinished = [task for task in tasks if not task.done()]
        for task in unfinished:
            task.cancel()
        if unfinished:
            await asyncio.gather(*unfinished, return_exceptions=True)

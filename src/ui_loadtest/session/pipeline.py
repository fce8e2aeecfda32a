"""
The ordered steps one simulated user runs through.

authenticate -> navigate -> await_affordance -> trigger -> await_readiness
are required: the first failure ends the session with a failed result.
Form interaction afterwards is best-effort and cannot undo a measurement.
"""

import logging
from typing import Awaitable, Callable, List, TypeVar

from ..capture import now_ms
from ..common.errors import describe_error
from ..config import LoadTestConfig
from ..exceptions import ReadinessTimeoutError, StepFailure
from ..race import RaceOutcome, poll_capture_buffer, race_signals, wait_for_selector
from .interactions import run_interactions
from .models import SessionDescriptor, SessionResult, StepOutcome

log = logging.getLogger(__name__)

T = TypeVar("T")


class SessionPipeline:
    """
    Runs the measured workflow for one session and returns its SessionResult.

    ``run()`` never raises for step failures; they come back as a failed
    result carrying the step name and error description.
    """

    def __init__(self, descriptor: SessionDescriptor, config: LoadTestConfig):
        self.descriptor = descriptor
        self.config = config
        self.page = descriptor.page
        self.log_identifier = f"[Session {descriptor.index}]"

    @property
    def username(self) -> str:
        return self.descriptor.credentials.username

    async def _step(self, name: str, action: Callable[[], Awaitable[T]]) -> T:
        try:
            return await action()
        except StepFailure:
            raise
        except Exception as e:
            raise StepFailure(name, describe_error(e)) from e

    async def _authenticate(self):
        selectors = self.config.selectors
        timeouts = self.config.timeouts
        credentials = self.descriptor.credentials

        await self.page.goto(
            self.config.login_url,
            wait_until="domcontentloaded",
            timeout=timeouts.navigation,
        )
        await self.page.fill(selectors.username, credentials.username, timeout=timeouts.navigation)
        await self.page.fill(selectors.password, credentials.password, timeout=timeouts.navigation)
        await self.page.click(selectors.login_submit, timeout=timeouts.navigation)

        await self.page.wait_for_url(self.config.post_login_url, timeout=timeouts.login)
        log.info("%s User %s logged in and redirected", self.log_identifier, self.username)

    async def _navigate(self):
        await self.page.goto(
            self.config.target_url,
            wait_until="domcontentloaded",
            timeout=self.config.timeouts.navigation,
        )
        log.info("%s Navigated to %s", self.log_identifier, self.config.target_url)

    async def _await_affordance(self):
        await self.page.wait_for_selector(
            self.config.selectors.start_button,
            state="visible",
            timeout=self.config.timeouts.affordance,
        )
        log.info("%s Start button is visible", self.log_identifier)

    async def _trigger(self) -> float:
        # clear -> start timestamp -> click: no suspension point between the
        # first two, so no console message can land in between.
        self.descriptor.capture.clear()
        start_ms = now_ms()
        await self.page.click(
            self.config.selectors.start_button,
            timeout=self.config.timeouts.affordance,
        )
        return start_ms

    async def _await_readiness(self) -> RaceOutcome:
        timeouts = self.config.timeouts
        selectors = self.config.selectors
        capture = self.descriptor.capture

        outcome = await race_signals(
            [
                lambda: poll_capture_buffer(
                    capture,
                    selectors.ready_marker,
                    interval_ms=timeouts.poll_interval,
                    timeout_ms=timeouts.race,
                ),
                lambda: wait_for_selector(self.page, selectors.modal, timeout_ms=timeouts.structural),
            ],
            deadline_ms=timeouts.race,
        )
        if outcome is None:
            raise ReadinessTimeoutError(timeouts.race)
        return outcome

    async def _interact(self) -> List[StepOutcome]:
        try:
            return await run_interactions(self.page, self.config, self.log_identifier)
        except Exception as e:
            log.info("%s Form interaction aborted: %s", self.log_identifier, describe_error(e))
            return [StepOutcome(name="interact", ok=False, detail=describe_error(e))]

    async def run(self) -> SessionResult:
        """Execute the pipeline and return this session's result."""
        index = self.descriptor.index

        try:
            await self._step("authenticate", self._authenticate)
            await self._step("navigate", self._navigate)
            await self._step("await_affordance", self._await_affordance)
            start_ms = await self._step("trigger", self._trigger)
            outcome = await self._step("await_readiness", self._await_readiness)
        except StepFailure as e:
            log.warning("%s Failed: %s", self.log_identifier, e)
            return SessionResult.failed(index, self.username, str(e))

        elapsed_ms = round(outcome.timestamp_ms - start_ms)
        log.info(
            "%s Modal opened in %dms (detected by %s)",
            self.log_identifier,
            elapsed_ms,
            outcome.method.value,
        )

        steps: List[StepOutcome] = []
        if self.config.interact:
            steps = await self._interact()

        return SessionResult.succeeded(
            index,
            self.username,
            elapsed_ms=elapsed_ms,
            method=outcome.method,
            steps=tuple(steps),
        )

"""
Runs N isolated session pipelines concurrently and collects one result each.

The join is "wait for all": a session that fails, or whose pipeline raises,
becomes a failed SessionResult and never affects its siblings.
"""

import asyncio
import logging
import time
from typing import Any, Callable, List, Optional, Tuple

from .browser import BrowserLauncher
from .capture import CaptureBuffer, ConsoleRecorder
from .common.errors import describe_error
from .config import LoadTestConfig
from .metrics import RunReport
from .resume import ImmediateResume, ResumeSignal, StdinResumeSignal
from .session import Credentials, SessionDescriptor, SessionPipeline, SessionResult

log = logging.getLogger(__name__)


class SessionOrchestrator:
    """
    Owns the browser, the per-session contexts and the concurrent join.

    Usage:
        orchestrator = SessionOrchestrator(config)
        report = await orchestrator.run()
        assert len(report.results) == config.num_sessions

    Args:
        config: Run configuration
        launcher: Browser launcher; defaults to one built from ``config``
        resume_signal: Awaited before cleanup when ``config.interactive``
        on_complete: Called with the report once every session has finished,
            before the interactive pause and before resources are released
        pipeline_factory: Builds the pipeline for one session
    """

    def __init__(
        self,
        config: LoadTestConfig,
        launcher: Optional[BrowserLauncher] = None,
        resume_signal: Optional[ResumeSignal] = None,
        on_complete: Optional[Callable[[RunReport], None]] = None,
        pipeline_factory: Callable[[SessionDescriptor, LoadTestConfig], Any] = SessionPipeline,
    ):
        self.config = config
        self.launcher = launcher or BrowserLauncher(
            headless=config.headless,
            executable_paths=config.executable_paths,
            launch_args=config.launch_args,
        )
        if resume_signal is None:
            resume_signal = StdinResumeSignal() if config.interactive else ImmediateResume()
        self.resume_signal = resume_signal
        self.on_complete = on_complete
        self.pipeline_factory = pipeline_factory
        self._contexts: List[Any] = []

    async def run(self) -> RunReport:
        """
        Launch the browser, run every session, release everything.

        Raises:
            BrowserLaunchError: If no browser could be launched (fatal for the run)
        """
        config = self.config
        started_at_ms = int(time.time() * 1000)
        start = time.monotonic()

        log.info(
            "Starting UI test: opening %s in %d concurrent contexts...",
            config.login_url,
            config.num_sessions,
        )
        browser = await self.launcher.start()

        try:
            descriptors, results = await self._open_sessions(browser)
            results.extend(await self._run_pipelines(descriptors))
            log.info("All sessions reached a terminal state.")

            report = RunReport.from_results(
                results,
                duration_seconds=time.monotonic() - start,
                started_at_ms=started_at_ms,
            )
            log.info(
                "UI results summary: %d successes out of %d",
                report.success_count,
                report.total,
            )

            if config.record_console:
                self._record_console(descriptors)

            if self.on_complete is not None:
                self.on_complete(report)

            if config.interactive:
                await self.resume_signal.wait()
        finally:
            await self._close_contexts()
            await self.launcher.stop()
            log.info("UI test finished.")

        return report

    async def _open_sessions(self, browser: Any) -> Tuple[List[SessionDescriptor], List[SessionResult]]:
        """
        Create one isolated context, page and capture buffer per session.

        A session whose context cannot be created gets a failed result right
        away; the others still run.
        """
        descriptors: List[SessionDescriptor] = []
        failures: List[SessionResult] = []

        for index in range(self.config.num_sessions):
            username = self.config.username
            try:
                username = self.config.username_for(index)
                context = await browser.new_context()
                self._contexts.append(context)
                page = await context.new_page()
            except Exception as e:
                log.warning("[Session %d] Could not open browser context: %s", index, describe_error(e))
                failures.append(
                    SessionResult.failed(index, username, f"open_context: {describe_error(e)}")
                )
                continue

            capture = CaptureBuffer()
            capture.attach(page)
            descriptors.append(
                SessionDescriptor(
                    index=index,
                    credentials=Credentials(username=username, password=self.config.password),
                    context=context,
                    page=page,
                    capture=capture,
                )
            )

        return descriptors, failures

    async def _run_pipelines(self, descriptors: List[SessionDescriptor]) -> List[SessionResult]:
        semaphore = (
            asyncio.Semaphore(self.config.max_concurrency)
            if self.config.max_concurrency
            else None
        )

        async def _run_one(descriptor: SessionDescriptor) -> SessionResult:
            pipeline = self.pipeline_factory(descriptor, self.config)
            if semaphore is None:
                return await pipeline.run()
            async with semaphore:
                return await pipeline.run()

        outcomes = await asyncio.gather(
            *(_run_one(descriptor) for descriptor in descriptors),
            return_exceptions=True,
        )

        results: List[SessionResult] = []
        for descriptor, outcome in zip(descriptors, outcomes):
            if isinstance(outcome, BaseException):
                log.error(
                    "[Session %d] Pipeline raised unexpectedly: %s",
                    descriptor.index,
                    describe_error(outcome),
                )
                outcome = SessionResult.failed(
                    descriptor.index,
                    descriptor.credentials.username,
                    describe_error(outcome),
                )
            results.append(outcome)
        return results

    def _record_console(self, descriptors: List[SessionDescriptor]):
        try:
            recorder = ConsoleRecorder(self.config.output_dir)
            for descriptor in descriptors:
                recorder.record_buffer(descriptor.index, descriptor.capture)
            path = recorder.save(f"console_messages_{int(time.time() * 1000)}.yaml")
        except OSError as e:
            log.warning("Could not write console recording: %s", e)
            return
        log.info("Recorded %d console messages to %s", recorder.get_message_count(), path)

    async def _close_contexts(self):
        contexts, self._contexts = self._contexts, []
        for context in contexts:
            try:
                await context.close()
            except Exception as e:
                log.warning("Error closing browser context: %s", describe_error(e))

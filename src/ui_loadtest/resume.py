"""
Signals that let a headful run pause for inspection before cleanup.
"""

import asyncio
import logging
import sys
import threading
from typing import Optional, Protocol, TextIO

log = logging.getLogger(__name__)


class ResumeSignal(Protocol):
    """Something the orchestrator can wait on before releasing browsers."""

    async def wait(self) -> None:
        ...


class ImmediateResume:
    """Resumes at once; used for headless and non-interactive runs."""

    async def wait(self) -> None:
        return None


class EventResumeSignal:
    """Resumes when ``set()`` is called; useful when embedding the harness."""

    def __init__(self):
        self._event = asyncio.Event()

    def set(self):
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


class StdinResumeSignal:
    """
    Prints a prompt and resumes once a line is read from stdin.

    The blocking read runs in a daemon thread that resolves a future on the
    event loop. Cancelling ``wait()`` (Ctrl-C) returns at once; the reader
    thread is abandoned and never joined at shutdown.
    """

    DEFAULT_PROMPT = (
        "Browsers opened in headful mode. Inspect the pages and perform tests "
        "manually. Press Enter in this terminal to close all browsers and finish."
    )

    def __init__(self, prompt: Optional[str] = None, stream: Optional[TextIO] = None, output: Optional[TextIO] = None):
        self.prompt = prompt or self.DEFAULT_PROMPT
        self.stream = stream
        self.output = output

    async def wait(self) -> None:
        output = self.output or sys.stdout
        output.write(self.prompt + "\n")
        output.flush()
        stream = self.stream or sys.stdin

        loop = asyncio.get_running_loop()
        line_read = loop.create_future()

        def _resolve():
            if not line_read.done():
                line_read.set_result(None)

        def _read_line():
            try:
                stream.readline()
            except (OSError, ValueError) as e:
                log.debug("Resume input unavailable, continuing: %s", e)
            try:
                loop.call_soon_threadsafe(_resolve)
            except RuntimeError:
                # Loop already closed: the run was interrupted before Enter.
                log.debug("Event loop closed before resume input arrived")

        threading.Thread(target=_read_line, name="resume-stdin", daemon=True).start()
        await line_read

"""
Per-session buffer of console messages emitted by the application under test.
"""

import time
from dataclasses import dataclass
from typing import Any, List, Optional


def now_ms() -> float:
    """Wall-clock time in milliseconds."""
    return time.time() * 1000


@dataclass(frozen=True)
class CapturedMessage:
    """One console message with the time it was observed."""

    text: str
    timestamp_ms: float


class CaptureBuffer:
    """
    Ordered log of console messages owned by exactly one session.

    Only the session's own console subscription appends to it. The owning
    pipeline clears it right before triggering the measured action so that
    messages from earlier steps cannot satisfy a later race.

    Usage:
        capture = CaptureBuffer()
        capture.attach(page)
        ...
        capture.clear()
        await page.click(button)
        message = capture.find_first_matching("FORM_READY")
    """

    def __init__(self):
        self._messages: List[CapturedMessage] = []

    def append(self, text: str, timestamp_ms: Optional[float] = None) -> CapturedMessage:
        """Record a message; the timestamp defaults to now."""
        message = CapturedMessage(
            text=text,
            timestamp_ms=now_ms() if timestamp_ms is None else timestamp_ms,
        )
        self._messages.append(message)
        return message

    def clear(self):
        """Drop every captured message, starting a fresh measurement window."""
        self._messages.clear()

    def find_first_matching(self, marker: str) -> Optional[CapturedMessage]:
        """Return the oldest message whose text contains ``marker``."""
        for message in self._messages:
            if marker in message.text:
                return message
        return None

    def attach(self, page: Any):
        """Subscribe to the page's console stream."""
        page.on("console", self._on_console)

    def _on_console(self, console_message: Any):
        self.append(console_message.text)

    @property
    def messages(self) -> List[CapturedMessage]:
        """Copy of the captured messages, oldest first."""
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

"""
Exception types for the load-test harness.

Provides:
- LoadTestError: base for everything raised on purpose by the harness
- BrowserLaunchError: no usable browser; fatal for the whole run
- StepFailure / ReadinessTimeoutError: per-session pipeline failures
- AppUnavailableError: preflight could not reach the application
"""

from typing import List, Optional


class LoadTestError(Exception):
    """Base exception for the load-test harness."""


class BrowserLaunchError(LoadTestError):
    """Raised when neither the managed browser nor any fallback executable starts."""

    def __init__(self, attempts: Optional[List[str]] = None):
        self.attempts = list(attempts or [])
        detail = "; ".join(self.attempts) if self.attempts else "no launch attempted"
        super().__init__(f"Could not launch a browser ({detail})")


class StepFailure(LoadTestError):
    """
    A required pipeline step failed for one session.

    Carries the name of the step so the session result can say where the
    pipeline stopped.
    """

    def __init__(self, step: str, message: str):
        self.step = step
        self.message = message
        super().__init__(f"{step}: {message}")


class ReadinessTimeoutError(StepFailure):
    """Neither readiness signal fired before the race deadline."""

    def __init__(self, deadline_ms: int):
        self.deadline_ms = deadline_ms
        super().__init__("await_readiness", "Timeout waiting for modal")


class AppUnavailableError(LoadTestError):
    """The application did not answer during the preflight check."""

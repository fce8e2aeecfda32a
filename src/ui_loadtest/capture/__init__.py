"""Console message capture for readiness detection."""

from .buffer import CaptureBuffer, CapturedMessage, now_ms
from .recorder import ConsoleRecorder

__all__ = ["CaptureBuffer", "CapturedMessage", "ConsoleRecorder", "now_ms"]

"""Readiness detection by racing independent signals."""

from .detector import DetectionMethod, Observation, RaceOutcome, race_signals
from .sources import poll_capture_buffer, wait_for_selector

__all__ = [
    "DetectionMethod",
    "Observation",
    "RaceOutcome",
    "race_signals",
    "poll_capture_buffer",
    "wait_for_selector",
]

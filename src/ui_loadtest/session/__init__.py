"""Per-session pipeline and its data records."""

from .models import Credentials, SessionDescriptor, SessionResult, StepOutcome
from .pipeline import SessionPipeline

__all__ = [
    "Credentials",
    "SessionDescriptor",
    "SessionResult",
    "StepOutcome",
    "SessionPipeline",
]

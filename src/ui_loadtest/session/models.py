"""
Data carried into and out of one session pipeline run.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ..capture import CaptureBuffer
from ..race import DetectionMethod


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str


@dataclass(frozen=True)
class SessionDescriptor:
    """
    Immutable input to one pipeline run.

    ``context`` and ``page`` belong to this session alone for its lifetime,
    as does ``capture``, which is subscribed to ``page``'s console.
    """

    index: int
    credentials: Credentials
    context: Any
    page: Any
    capture: CaptureBuffer = field(default_factory=CaptureBuffer)


@dataclass(frozen=True)
class StepOutcome:
    """Result-or-error value of one best-effort sub-step."""

    name: str
    ok: bool
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ok": self.ok, "detail": self.detail}


@dataclass(frozen=True)
class SessionResult:
    """
    Terminal outcome of one session.

    On success ``elapsed_ms`` and ``method`` are set; on failure ``error``
    describes what stopped the pipeline. ``steps`` lists the best-effort
    sub-steps that ran after the measurement.
    """

    index: int
    username: str
    success: bool
    elapsed_ms: Optional[float] = None
    method: Optional[DetectionMethod] = None
    error: Optional[str] = None
    steps: Tuple[StepOutcome, ...] = ()

    @classmethod
    def succeeded(
        cls,
        index: int,
        username: str,
        elapsed_ms: float,
        method: DetectionMethod,
        steps: Tuple[StepOutcome, ...] = (),
    ) -> "SessionResult":
        return cls(
            index=index,
            username=username,
            success=True,
            elapsed_ms=elapsed_ms,
            method=method,
            steps=steps,
        )

    @classmethod
    def failed(cls, index: int, username: str, error: str) -> "SessionResult":
        return cls(
            index=index,
            username=username,
            success=False,
            error=error or "unknown error",
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form used in the result artifact."""
        data: Dict[str, Any] = {
            "index": self.index,
            "username": self.username,
            "success": self.success,
        }
        if self.success:
            data["clickToModalElapsed"] = self.elapsed_ms
            data["method"] = self.method.value if self.method else None
            data["steps"] = [step.to_dict() for step in self.steps]
        else:
            data["error"] = self.error
        return data

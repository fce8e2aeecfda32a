"""
Summary statistics over the measured click-to-modal latencies.
"""

import math
import statistics
from dataclasses import dataclass, asdict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..session import SessionResult


@dataclass(frozen=True)
class SummaryStatistics:
    """Count, mean (one decimal) and nearest-rank p50/p95, in milliseconds."""

    count: int
    mean: float
    p50: float
    p95: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def nearest_rank(sorted_values: Sequence[float], fraction: float) -> float:
    """
    Element at index ``floor(k * fraction)`` of an ascending sequence.

    The index is clamped to the last element, so ``fraction`` of 1.0 yields
    the maximum rather than an out-of-range index.
    """
    if not sorted_values:
        raise ValueError("nearest_rank requires at least one value")
    idx = math.floor(len(sorted_values) * fraction)
    return sorted_values[min(idx, len(sorted_values) - 1)]


def summarize(values: Iterable[float]) -> Optional[SummaryStatistics]:
    """
    Compute summary statistics; returns None for an empty input.

    Args:
        values: Latencies in milliseconds, in any order

    Returns:
        SummaryStatistics, or None when there is nothing to summarize
    """
    sorted_values = sorted(values)
    if not sorted_values:
        return None

    return SummaryStatistics(
        count=len(sorted_values),
        mean=round(statistics.fmean(sorted_values), 1),
        p50=nearest_rank(sorted_values, 0.50),
        p95=nearest_rank(sorted_values, 0.95),
    )


def latencies_from(results: Iterable[SessionResult]) -> List[float]:
    """Elapsed values of the successful sessions, ascending."""
    return sorted(
        r.elapsed_ms for r in results if r.success and r.elapsed_ms is not None
    )

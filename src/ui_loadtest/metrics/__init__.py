"""Latency aggregation and reporting."""

from .aggregator import SummaryStatistics, latencies_from, nearest_rank, summarize
from .reporter import RunReport, RunReporter

__all__ = [
    "SummaryStatistics",
    "latencies_from",
    "nearest_rank",
    "summarize",
    "RunReport",
    "RunReporter",
]

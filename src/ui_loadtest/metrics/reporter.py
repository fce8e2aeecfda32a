"""
Console and JSON reporting for a finished run.
"""

import json
import os
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from ..session import SessionResult
from .aggregator import SummaryStatistics, latencies_from, summarize


@dataclass
class RunReport:
    """Ordered session results of one run plus their summary statistics."""

    results: List[SessionResult]
    statistics: Optional[SummaryStatistics] = None
    duration_seconds: float = 0.0
    started_at_ms: int = field(default_factory=lambda: int(time.time() * 1000))

    @classmethod
    def from_results(
        cls,
        results: List[SessionResult],
        duration_seconds: float = 0.0,
        started_at_ms: Optional[int] = None,
    ) -> "RunReport":
        ordered = sorted(results, key=lambda r: r.index)
        report = cls(
            results=ordered,
            statistics=summarize(latencies_from(ordered)),
            duration_seconds=duration_seconds,
        )
        if started_at_ms is not None:
            report.started_at_ms = started_at_ms
        return report

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def total(self) -> int:
        return len(self.results)


class RunReporter:
    """
    Reporter for a load-test run.

    Usage:
        reporter = RunReporter(report)
        reporter.print_summary()
        path = reporter.save_json("results/")
    """

    def __init__(self, report: RunReport):
        self.report = report

    def print_summary(self, file: TextIO = None):
        """
        Print a human-readable summary.

        Args:
            file: Optional file to write to (defaults to stdout)
        """
        if file is None:
            file = sys.stdout

        report = self.report
        stats = report.statistics

        file.write("\n")
        file.write("=" * 70 + "\n")
        file.write("  UI LOAD TEST REPORT: click-to-modal\n")
        file.write("=" * 70 + "\n")
        file.write(f"  Duration: {report.duration_seconds:.2f} seconds\n")
        file.write(f"  Sessions: {report.success_count} successes out of {report.total}\n")
        file.write("=" * 70 + "\n\n")

        file.write("LATENCY STATISTICS (milliseconds)\n")
        file.write("-" * 70 + "\n")
        if stats is None:
            file.write("  No successful sessions; no statistics.\n")
        else:
            file.write(f"{'Count':>8} {'Mean':>10} {'P50':>10} {'P95':>10}\n")
            file.write(
                f"{stats.count:>8} {stats.mean:>10.1f} {stats.p50:>10.1f} {stats.p95:>10.1f}\n"
            )
        file.write("\n")

        failures = [r for r in report.results if not r.success]
        if failures:
            file.write(f"FAILED SESSIONS (first 10 of {len(failures)})\n")
            file.write("-" * 70 + "\n")
            for result in failures[:10]:
                file.write(f"  [{result.index}] {result.username}: {(result.error or '')[:60]}\n")
            file.write("\n")

        file.write("=" * 70 + "\n")

    def get_json_report(self) -> Dict[str, Any]:
        """Full ordered results plus statistics (null when absent)."""
        stats = self.report.statistics
        return {
            "results": [r.to_dict() for r in self.report.results],
            "stats": stats.to_dict() if stats else None,
        }

    def save_json(self, output_dir: str = ".") -> Path:
        """
        Write the report to ``ui_load_results_<epoch ms>.json`` in ``output_dir``.

        Returns:
            Path of the written file
        """
        os.makedirs(output_dir or ".", exist_ok=True)
        path = Path(output_dir) / f"ui_load_results_{self.report.started_at_ms}.json"

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.get_json_report(), f, indent=2, ensure_ascii=False, default=str)

        return path

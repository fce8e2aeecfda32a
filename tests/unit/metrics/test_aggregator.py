"""
Unit tests for the latency aggregator.
"""

import pytest

from ui_loadtest.metrics.aggregator import latencies_from, nearest_rank, summarize
from ui_loadtest.race import DetectionMethod
from ui_loadtest.session import SessionResult


class TestSummarize:

    def test_five_values(self):
        stats = summarize([100, 200, 300, 400, 500])

        assert stats.count == 5
        assert stats.mean == 300.0
        assert stats.p50 == 300
        assert stats.p95 == 500

    def test_order_of_input_does_not_matter(self):
        assert summarize([500, 100, 400, 300, 200]) == summarize([100, 200, 300, 400, 500])

    def test_single_value(self):
        stats = summarize([250])

        assert (stats.count, stats.mean, stats.p50, stats.p95) == (1, 250.0, 250, 250)

    def test_empty_is_none(self):
        assert summarize([]) is None

    def test_mean_rounded_to_one_decimal(self):
        assert summarize([100, 101, 101]).mean == 100.7

    def test_percentiles_are_observed_values(self):
        values = [120, 95, 300, 180, 240, 410, 150]
        stats = summarize(values)

        assert stats.p50 in values
        assert stats.p95 in values
        assert stats.p50 <= stats.p95

    def test_to_dict(self):
        assert summarize([10, 20]).to_dict() == {"count": 2, "mean": 15.0, "p50": 20, "p95": 20}


class TestNearestRank:

    def test_index_clamped_to_last_element(self):
        assert nearest_rank([1, 2, 3], 1.0) == 3

    def test_floor_of_rank(self):
        # floor(20 * 0.95) = 19
        assert nearest_rank(list(range(20)), 0.95) == 19
        assert nearest_rank(list(range(10)), 0.5) == 5

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            nearest_rank([], 0.5)


def test_latencies_from_uses_successes_only():
    results = [
        SessionResult.succeeded(0, "1", elapsed_ms=300, method=DetectionMethod.DOM),
        SessionResult.failed(1, "1", "await_readiness: Timeout waiting for modal"),
        SessionResult.succeeded(2, "1", elapsed_ms=120, method=DetectionMethod.LOG),
    ]

    assert latencies_from(results) == [120, 300]

"""
Unit tests for Prometheus metrics.

Each test uses its own CollectorRegistry so counts do not leak.
"""

from unittest.mock import patch

import pytest
from prometheus_client import CollectorRegistry, Counter

from querydiff.cells import Cell
from querydiff.exceptions import ComparisonTimeoutError
from querydiff.result import DiffResult, MatchMode, MatchOutcome, MismatchedRow, MissingRow
from querydiff.utils.metrics import ComparisonMetrics, MetricsPublisher, get_or_create_metric

ROW = (Cell.of(1), Cell.of(5))


def different_result():
    outcome = MatchOutcome(
        missing_left=[MissingRow(3, ROW)],
        missing_right=[MissingRow(4, ROW), MissingRow(5, ROW)],
        mismatched=[
            MismatchedRow(1, 1, ROW, (Cell.of(1), Cell.of("5")), frozenset({1}), frozenset({1}))
        ],
    )
    return DiffResult.build(MatchMode.KEYED, outcome, 3, 4)


class TestComparisonMetrics:
    """Test ComparisonMetrics recording."""

    def test_record_comparison(self, metrics, registry):
        metrics.record_comparison(different_result(), duration=0.25)

        sample = registry.get_sample_value
        assert sample("querydiff_comparisons_total", {"mode": "keyed", "status": "different"}) == 1
        assert sample("querydiff_rows_compared_total", {"side": "left"}) == 3
        assert sample("querydiff_rows_compared_total", {"side": "right"}) == 4
        assert sample("querydiff_missing_rows_total", {"side": "left"}) == 1
        assert sample("querydiff_missing_rows_total", {"side": "right"}) == 2
        assert sample("querydiff_mismatched_rows_total") == 1
        assert sample("querydiff_type_drift_cells_total") == 1
        assert sample("querydiff_row_count_mismatch_total") == 1
        assert sample("querydiff_comparison_duration_seconds_count", {"mode": "keyed"}) == 1
        assert sample("querydiff_last_run_timestamp") > 0

    def test_record_equal(self, metrics, registry):
        metrics.record_comparison(DiffResult.build(MatchMode.FINGERPRINT, MatchOutcome(), 2, 2), 0.1)

        assert registry.get_sample_value(
            "querydiff_comparisons_total", {"mode": "fingerprint", "status": "equal"}
        ) == 1
        assert registry.get_sample_value("querydiff_row_count_mismatch_total") == 0

    def test_record_failure(self, metrics, registry):
        metrics.record_failure("keyed", ComparisonTimeoutError(1.0))

        assert registry.get_sample_value(
            "querydiff_comparisons_total", {"mode": "keyed", "status": "error"}
        ) == 1

    def test_same_registry_reuses_metrics(self, registry):
        first = ComparisonMetrics(registry=registry)
        second = ComparisonMetrics(registry=registry)

        assert first.comparisons_total is second.comparisons_total


class TestGetOrCreateMetric:
    """Test safe metric registration."""

    def test_returns_existing(self):
        registry = CollectorRegistry()

        def factory():
            return Counter("querydiff_test_total", "Test", registry=registry)

        first = get_or_create_metric(factory, "querydiff_test_total", registry)
        second = get_or_create_metric(factory, "querydiff_test_total", registry)

        assert first is second

    def test_other_errors_propagate(self):
        def factory():
            raise ValueError("invalid metric name")

        with pytest.raises(ValueError):
            get_or_create_metric(factory, "querydiff_unknown", CollectorRegistry())


class TestMetricsPublisher:
    """Test the HTTP exporter wrapper."""

    @patch("querydiff.utils.metrics.publisher.start_http_server")
    def test_start_once(self, mock_start, registry):
        publisher = MetricsPublisher(port=9191, registry=registry)

        publisher.start()
        publisher.start()

        mock_start.assert_called_once_with(9191, registry=registry)
        assert publisher.is_started()

    @patch("querydiff.utils.metrics.publisher.start_http_server", side_effect=OSError("in use"))
    def test_port_in_use(self, mock_start):
        publisher = MetricsPublisher(port=9191)

        with pytest.raises(RuntimeError, match="cannot bind port 9191"):
            publisher.start()
        assert not publisher.is_started()

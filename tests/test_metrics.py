"""Tests for request metrics collection."""

from __future__ import annotations

from observability.metrics import RequestMetrics, parse_rate_limit
from schemas.observability import APICallRecord


def test_empty_collector():
    metrics = RequestMetrics()

    assert metrics.total_calls == 0
    assert metrics.avg_latency_ms == 0.0
    assert metrics.rate_limit_remaining is None


def test_summary_aggregates_records():
    metrics = RequestMetrics()
    metrics.record(APICallRecord(method="GET", route="/apps", latency_ms=10.0, rate_limit_remaining=100))
    metrics.record(APICallRecord(method="GET", route="/apps", latency_ms=30.0, attempts=2))
    metrics.record(APICallRecord(method="DELETE", route="/apps/x/dynos", success=False, latency_ms=20.0))

    summary = metrics.summary()

    assert summary["total_calls"] == 3
    assert summary["failed_calls"] == 1
    assert summary["total_attempts"] == 4
    assert summary["avg_latency_ms"] == 20.0
    # last record without the header does not hide an earlier value
    assert summary["rate_limit_remaining"] == 100
    assert metrics.calls_by_route() == {"GET /apps": 2, "DELETE /apps/x/dynos": 1}


def test_parse_rate_limit():
    assert parse_rate_limit("4500") == 4500
    assert parse_rate_limit(" 12 ") == 12
    assert parse_rate_limit("n/a") is None
    assert parse_rate_limit(None) is None

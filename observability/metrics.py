"""Request counting, latency and rate-limit tracking for Heroku API calls."""

from __future__ import annotations

from collections import Counter

from schemas.observability import APICallRecord


def parse_rate_limit(value: str | None) -> int | None:
    """Parse a `RateLimit-Remaining` header value, ignoring garbage."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


class RequestMetrics:
    """Collects API call records for the lifetime of a client."""

    def __init__(self) -> None:
        self.records: list[APICallRecord] = []

    def record(self, rec: APICallRecord) -> None:
        self.records.append(rec)

    @property
    def total_calls(self) -> int:
        return len(self.records)

    @property
    def failed_calls(self) -> int:
        return sum(1 for r in self.records if not r.success)

    @property
    def total_attempts(self) -> int:
        return sum(r.attempts for r in self.records)

    @property
    def avg_latency_ms(self) -> float:
        if not self.records:
            return 0.0
        return round(sum(r.latency_ms for r in self.records) / len(self.records), 2)

    @property
    def rate_limit_remaining(self) -> int | None:
        """Most recent remaining-request budget reported by the API."""
        for rec in reversed(self.records):
            if rec.rate_limit_remaining is not None:
                return rec.rate_limit_remaining
        return None

    def calls_by_route(self) -> dict[str, int]:
        return dict(Counter(f"{r.method} {r.route}" for r in self.records))

    def summary(self) -> dict:
        return {
            "total_calls": self.total_calls,
            "failed_calls": self.failed_calls,
            "total_attempts": self.total_attempts,
            "avg_latency_ms": self.avg_latency_ms,
            "rate_limit_remaining": self.rate_limit_remaining,
        }

"""Prometheus metrics for outbound GoCardless API calls"""

from prometheus_client import Counter, Histogram

request_counter = Counter(
    "gocardless_requests_total",
    "GoCardless API calls by operation and outcome",
    ["operation", "outcome"],  # success | api_error | transport_error | decode_error
)

request_duration_histogram = Histogram(
    "gocardless_request_duration_seconds",
    "GoCardless API response time",
    ["operation"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)


def record_request(operation: str, outcome: str, duration_seconds: float) -> None:
    """Record a single API call"""
    request_counter.labels(operation=operation, outcome=outcome).inc()
    request_duration_histogram.labels(operation=operation).observe(duration_seconds)

"""
Metrics for the Lightspeed Retail API client.

This module provides latency and failure metrics for calls made to Lightspeed.
"""

from prometheus_client import Counter, Histogram


# Define histogram for API call latency
API_CALL_LATENCY = Histogram(
    "lightspeed_api_call_duration_seconds",
    "Duration of API calls to Lightspeed Retail",
    ["api_method"],
    buckets=(0.05, 0.1, 0.5, 1.0, 5.0, 10.0, float("inf")),
)

# Define counter for failed client operations
API_CALL_FAILURES = Counter(
    "lightspeed_api_call_failures",
    "Failed Lightspeed client operations",
    ["operation", "kind"],
)


def record_failure(operation: str, kind: str) -> None:
    """Count a failed client operation under its error kind."""
    API_CALL_FAILURES.labels(operation=operation, kind=kind).inc()

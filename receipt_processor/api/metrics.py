"""Prometheus metrics for the receipt API.

Exposes key metrics for monitoring:
- Request counts by endpoint and status
- Request duration histograms
- Receipt processing outcomes and rejection reasons
- Points awarded

Based on Prometheus best practices:
https://prometheus.io/docs/practices/naming/
"""

from prometheus_client import Counter, Histogram, generate_latest
from prometheus_client.openmetrics.exposition import CONTENT_TYPE_LATEST

# Request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
)

# Receipt processing metrics
receipts_processed_total = Counter(
    "receipts_processed_total",
    "Total receipts submitted for processing",
    ["status"],  # accepted, rejected, failed
)

receipt_rejections_total = Counter(
    "receipt_rejections_total",
    "Total receipts rejected by validation",
    ["reason"],
)

# Scoring metrics
points_awarded = Histogram(
    "receipt_points_awarded",
    "Points awarded per points lookup",
    buckets=(10, 25, 50, 75, 100, 150, 250, 500),
)

points_lookups_total = Counter(
    "receipt_points_lookups_total",
    "Total points lookups",
    ["status"],  # found, not_found
)


def get_metrics() -> tuple[bytes, str]:
    """Generate Prometheus metrics in text format.

    Returns:
        Tuple of (metrics bytes, content type)
    """
    return generate_latest(), CONTENT_TYPE_LATEST

"""Prometheus metrics for the Venue Credit Gateway service.

Metrics are organized into two categories:

Business Metrics (for Credit/Finance):
- venue_credit_assessment_total: Assessments by grade and eligibility
- venue_credit_score: Distribution of composite scores
- venue_credit_recommended_limit: Recommended limits for offerable venues
- venue_credit_offer_actions_total: Offer lifecycle actions

Technical Metrics (for Engineering/SRE):
- venue_credit_assessment_latency_seconds: Single assessment latency
- venue_credit_batch_refresh_total: Batch refresh outcomes per venue
- venue_credit_batch_refresh_in_progress: Running batch refreshes
- venue_credit_venue_fetch_latency_seconds: Payments platform latency
- venue_credit_venue_fetch_failures_total: Payments platform failures
- venue_credit_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Credit/Finance dashboards)
# =============================================================================

assessment_total = Counter(
    "venue_credit_assessment_total",
    "Total number of venue credit assessments",
    ["grade", "eligibility"],
)

credit_score_histogram = Histogram(
    "venue_credit_score",
    "Composite credit score of assessed venues",
    buckets=[10, 20, 30, 40, 50, 65, 80, 90, 100],
)

recommended_limit_histogram = Histogram(
    "venue_credit_recommended_limit",
    "Recommended credit limit for venues with an offer",
    buckets=[50_000, 100_000, 250_000, 500_000, 1_000_000, 2_000_000, 3_000_000],
)

offer_actions_total = Counter(
    "venue_credit_offer_actions_total",
    "Credit offer lifecycle actions",
    ["action"],  # create, accept, reject, withdraw, expire
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

assessment_latency = Histogram(
    "venue_credit_assessment_latency_seconds",
    "Latency of a single venue assessment (fetch, score, persist)",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

batch_refresh_total = Counter(
    "venue_credit_batch_refresh_total",
    "Venues processed by batch refreshes",
    ["outcome"],  # success, failure
)

batch_refresh_in_progress = Gauge(
    "venue_credit_batch_refresh_in_progress",
    "Number of batch refreshes currently running",
)

venue_fetch_latency = Histogram(
    "venue_credit_venue_fetch_latency_seconds",
    "Payments platform fetch latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

venue_fetch_failures = Counter(
    "venue_credit_venue_fetch_failures_total",
    "Total number of payments platform failures",
    ["error_type"],  # timeout, error, not_found
)

venue_fetch_total = Counter(
    "venue_credit_venue_fetch_total",
    "Total number of payments platform requests",
    ["status"],  # success, failure
)

http_requests_total = Counter(
    "venue_credit_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "venue_credit_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_assessment(grade: str, eligibility: str, score: int, recommended_limit: float) -> None:
    """Record a completed assessment in metrics."""
    assessment_total.labels(grade=grade, eligibility=eligibility).inc()
    credit_score_histogram.observe(score)
    if recommended_limit > 0:
        recommended_limit_histogram.observe(recommended_limit)


def record_offer_action(action: str) -> None:
    """Record an offer lifecycle action."""
    offer_actions_total.labels(action=action).inc()


def record_batch_outcome(success: int, failed: int) -> None:
    """Record the per-venue outcomes of a batch refresh."""
    batch_refresh_total.labels(outcome="success").inc(success)
    batch_refresh_total.labels(outcome="failure").inc(failed)


@contextmanager
def track_assessment_latency() -> Generator[None, None, None]:
    """Context manager to track assessment latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        assessment_latency.observe(duration)


@contextmanager
def track_batch_refresh() -> Generator[None, None, None]:
    """Context manager marking a batch refresh as in progress."""
    batch_refresh_in_progress.inc()
    try:
        yield
    finally:
        batch_refresh_in_progress.dec()


@contextmanager
def track_venue_fetch_latency() -> Generator[None, None, None]:
    """Context manager to track payments platform fetch latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        venue_fetch_latency.observe(duration)


def record_venue_fetch_success() -> None:
    """Record a successful payments platform fetch."""
    venue_fetch_total.labels(status="success").inc()


def record_venue_fetch_failure(error_type: str) -> None:
    """Record a payments platform fetch failure."""
    venue_fetch_total.labels(status="failure").inc()
    venue_fetch_failures.labels(error_type=error_type).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST

"""Prometheus metrics for the Vibe Gateway service.

Metrics are organized into two categories:

Business Metrics (for Product/Finance):
- vibe_loan_quotes_total: Interest-rate quotes by calculation method
- vibe_loans_funded_total: Funding events
- vibe_repayments_total: Completed repayments
- vibe_repayment_volume_paise_total: Repaid volume
- vibe_platform_fees_paise_total: Platform fees retained
- vibe_wallet_ledger_total: Ledger entries by direction and reference
- vibe_document_verifications_total: Verification outcomes

Technical Metrics (for Engineering/SRE):
- vibe_ai_request_latency_seconds: Gemini request latency
- vibe_ai_request_failures_total: Gemini failures
- vibe_stripe_failures_total: Stripe failures by operation
- vibe_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Product/Finance dashboards)
# =============================================================================

loan_quotes_total = Counter(
    "vibe_loan_quotes_total",
    "Total number of interest-rate quotes computed",
    ["method"],  # ai, rules
)

loans_funded_total = Counter(
    "vibe_loans_funded_total",
    "Total number of loan funding events",
    ["fully_funded"],
)

repayments_total = Counter(
    "vibe_repayments_total",
    "Total number of completed loan repayments",
)

repayment_volume = Counter(
    "vibe_repayment_volume_paise_total",
    "Total repaid amount in paise",
)

platform_fees = Counter(
    "vibe_platform_fees_paise_total",
    "Total platform fees retained in paise",
)

wallet_ledger_total = Counter(
    "vibe_wallet_ledger_total",
    "Wallet ledger entries written",
    ["direction", "reference_type"],
)

document_verifications_total = Counter(
    "vibe_document_verifications_total",
    "Document verification outcomes",
    ["document_type", "outcome"],  # verified, rejected
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

ai_request_latency = Histogram(
    "vibe_ai_request_latency_seconds",
    "Generative AI request latency in seconds",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

ai_request_failures = Counter(
    "vibe_ai_request_failures_total",
    "Total number of generative AI request failures",
    ["error_type"],  # timeout, http_error, malformed
)

stripe_failures = Counter(
    "vibe_stripe_failures_total",
    "Total number of Stripe API failures",
    ["operation"],
)

http_requests_total = Counter(
    "vibe_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "vibe_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_quote(method: str) -> None:
    """Record an interest-rate quote."""
    loan_quotes_total.labels(method=method).inc()


def record_funding(fully_funded: bool) -> None:
    """Record a loan funding event."""
    loans_funded_total.labels(fully_funded=str(fully_funded).lower()).inc()


def record_repayment(amount_paise: int, platform_fee_paise: int) -> None:
    """Record a completed repayment."""
    repayments_total.inc()
    repayment_volume.inc(amount_paise)
    platform_fees.inc(platform_fee_paise)


def record_ledger_entry(direction: str, reference_type: str) -> None:
    """Record a wallet ledger entry."""
    wallet_ledger_total.labels(
        direction=direction,
        reference_type=reference_type,
    ).inc()


def record_verification(document_type: str, verified: bool) -> None:
    """Record a document verification outcome."""
    outcome = "verified" if verified else "rejected"
    document_verifications_total.labels(
        document_type=document_type,
        outcome=outcome,
    ).inc()


@contextmanager
def track_ai_latency() -> Generator[None, None, None]:
    """Context manager to track generative AI request latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        ai_request_latency.observe(duration)


def record_ai_failure(error_type: str) -> None:
    """Record a generative AI request failure."""
    ai_request_failures.labels(error_type=error_type).inc()


def record_stripe_failure(operation: str) -> None:
    """Record a failed Stripe API call."""
    stripe_failures.labels(operation=operation).inc()


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

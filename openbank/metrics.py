"""
Prometheus metrics for the open banking mock API.

This module defines all metrics exposed at the /metrics endpoint.
Metrics are categorized into:

1. Link flow metrics - link tokens and public token exchanges
2. Data access metrics - authorization outcomes and result sizes
3. HTTP metrics - request counts and latencies
"""
from prometheus_client import Counter, Histogram, Info

# =============================================================================
# SERVICE INFO
# =============================================================================

SERVICE_INFO = Info(
    "openbank_service",
    "Service information"
)
SERVICE_INFO.info({
    "version": "0.1.0",
    "service": "openbank-mock",
})

# =============================================================================
# LINK FLOW METRICS
# =============================================================================

LINK_TOKENS_CREATED = Counter(
    "openbank_link_tokens_created_total",
    "Placeholder link tokens handed out"
)

TOKEN_EXCHANGES = Counter(
    "openbank_token_exchanges_total",
    "Public token exchange attempts",
    ["outcome"]  # issued, missing_public_token, unknown_persona
)

# =============================================================================
# DATA ACCESS METRICS
# =============================================================================

AUTH_REJECTIONS = Counter(
    "openbank_auth_rejections_total",
    "Requests rejected by the authorization gate",
    ["reason"]  # missing, invalid
)

TRANSACTIONS_RETURNED = Histogram(
    "openbank_transactions_returned",
    "Number of transactions returned per request",
    buckets=[0, 1, 5, 10, 25, 50, 100, 250]
)

DATE_FILTERS_IGNORED = Counter(
    "openbank_date_filters_ignored_total",
    "Unparseable date bounds that were dropped",
    ["bound"]  # start, end
)

WEBHOOKS_RECEIVED = Counter(
    "openbank_webhooks_received_total",
    "Webhook notifications received",
    ["webhook_type"]
)

# =============================================================================
# HTTP METRICS (Standard)
# =============================================================================

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

HTTP_REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_http_request(method: str, endpoint: str, status: int, latency_seconds: float) -> None:
    """Record a completed HTTP request."""
    HTTP_REQUESTS.labels(method=method, endpoint=endpoint, status=status).inc()
    HTTP_REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(latency_seconds)


def record_exchange(outcome: str) -> None:
    """Record the outcome of a public token exchange."""
    TOKEN_EXCHANGES.labels(outcome=outcome).inc()


def record_auth_rejection(reason: str) -> None:
    """Record a request the authorization gate turned away."""
    AUTH_REJECTIONS.labels(reason=reason).inc()


def record_transactions_returned(count: int) -> None:
    TRANSACTIONS_RETURNED.observe(count)


def record_ignored_date_filter(bound: str) -> None:
    DATE_FILTERS_IGNORED.labels(bound=bound).inc()


def record_webhook(webhook_type: str) -> None:
    WEBHOOKS_RECEIVED.labels(webhook_type=webhook_type).inc()

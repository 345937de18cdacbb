from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


HTTP_REQUESTS_TOTAL = Counter(
    "wallet_proxy_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "wallet_proxy_http_request_duration_seconds",
    "HTTP request duration (seconds)",
    ["method", "path"],
)

UPSTREAM_CALLS_TOTAL = Counter(
    "wallet_proxy_upstream_calls_total",
    "Calls to the transaction service",
    ["endpoint", "result"],
)

UPSTREAM_CALL_DURATION_SECONDS = Histogram(
    "wallet_proxy_upstream_call_duration_seconds",
    "Transaction service call duration (seconds)",
    ["endpoint"],
)

RATE_LIMIT_REJECTIONS_TOTAL = Counter(
    "wallet_proxy_rate_limit_rejections_total",
    "Inbound requests rejected by the rate limiter",
)

VALIDATION_FAILURES_TOTAL = Counter(
    "wallet_proxy_validation_failures_total",
    "Requests rejected by parameter validation",
    ["route"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST

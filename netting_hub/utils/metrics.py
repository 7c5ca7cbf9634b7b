from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


HTTP_REQUESTS_TOTAL = Counter(
    "netting_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "netting_http_request_duration_seconds",
    "HTTP request duration (seconds)",
    ["method", "path"],
)

NETTING_EVENTS_TOTAL = Counter(
    "netting_events_total",
    "Netting events",
    ["event", "result"],
)

NETTING_CANCELLED_AMOUNT_TOTAL = Counter(
    "netting_cancelled_amount_total",
    "Total obligation amount cancelled by netting",
    ["token"],
)


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST

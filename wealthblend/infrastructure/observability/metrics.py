"""Prometheus metrics for record writes, budget alerts and webhook performance"""

from prometheus_client import Counter, Histogram

# Record pipeline metrics
records_saved_counter = Counter(
    "wealthblend_records_saved_total",
    "Records persisted after derivation",
    ["record_type", "operation"],  # tax|budget|estate, create|update|add_transaction|rollover
)

validation_failures_counter = Counter(
    "wealthblend_validation_failures_total",
    "Writes rejected by field validation",
    ["record_type"],
)

# Budget metrics
budget_status_counter = Counter(
    "wealthblend_budget_status_total",
    "Automatic budget status transitions",
    ["status"],  # exceeded | active
)

budget_alert_counter = Counter(
    "wealthblend_budget_alerts_total",
    "Budget alerts attempted",
    ["outcome"],  # delivered | failed
)

# Webhook metrics
webhook_latency_histogram = Histogram(
    "alert_webhook_latency_seconds",
    "Alert webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

webhook_failure_counter = Counter(
    "alert_webhook_failures_total",
    "Failed alert webhook deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_saved(record_type: str, operation: str) -> None:
    records_saved_counter.labels(record_type=record_type, operation=operation).inc()


def record_status_transition(old_status: str, new_status: str) -> None:
    """Count only real transitions so dashboards show flips, not saves"""
    if old_status != new_status:
        budget_status_counter.labels(status=new_status).inc()

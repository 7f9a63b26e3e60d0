"""Prometheus metrics for recurring executions, budget health and request latency"""

from prometheus_client import Counter, Histogram

# Recurring template metrics
template_execution_counter = Counter(
    "finance_template_executions_total",
    "Recurring templates turned into transactions",
    ["trigger"],  # manual | scheduled
)

# Budget metrics
budget_evaluation_counter = Counter(
    "finance_budget_evaluations_total",
    "Budget evaluations after an expense was recorded",
    ["status"],  # safe | warning | danger
)

notification_counter = Counter(
    "finance_notifications_total",
    "Notifications created for users",
    ["type"],  # warning | error
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_template_execution(trigger: str) -> None:
    template_execution_counter.labels(trigger=trigger).inc()


def record_budget_evaluation(status: str, notification_type: str | None) -> None:
    """Record the evaluated status and, when one was raised, the notification type"""
    budget_evaluation_counter.labels(status=status).inc()
    if notification_type is not None:
        notification_counter.labels(type=notification_type).inc()

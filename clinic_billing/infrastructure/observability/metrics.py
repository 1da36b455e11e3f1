"""Prometheus metrics for plan creation, payments and request latency"""

from prometheus_client import Counter, Histogram

# Plan metrics
plans_created_counter = Counter(
    "clinic_plans_created_total",
    "Installment plans stored",
    ["payment_method"],  # credit_card | pix | cash
)

installments_scheduled_counter = Counter(
    "clinic_installments_scheduled_total",
    "Installment rows written",
    ["payment_method"],
)

plan_persistence_failures_counter = Counter(
    "clinic_plan_persistence_failures_total",
    "Plan inserts rolled back after a storage error",
)

schedule_drift_counter = Counter(
    "clinic_schedule_drift_total",
    "Plans whose installment amounts do not sum to the total",
)

# Payment metrics
payments_marked_paid_counter = Counter(
    "clinic_payments_marked_paid_total",
    "Installments settled manually",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_plan(payment_method: str, installments: int, drifted: bool) -> None:
    """Record plan metrics for monitoring payment method mix and rounding gaps"""
    plans_created_counter.labels(payment_method=payment_method).inc()
    installments_scheduled_counter.labels(payment_method=payment_method).inc(installments)
    if drifted:
        schedule_drift_counter.inc()

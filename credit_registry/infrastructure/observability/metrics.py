"""Prometheus metrics for request latency, entity creation and validation rejects"""

from prometheus_client import Counter, Histogram

entities_created_counter = Counter(
    "credit_registry_entities_created_total",
    "Entities persisted through the API",
    ["entity"],  # item | client | bank | credit
)

validation_failures_counter = Counter(
    "credit_registry_validation_failures_total",
    "Payloads rejected by the validation layer",
    ["entity"],
)

credits_created_counter = Counter(
    "credit_registry_credits_created_total",
    "Credits created by type",
    ["credit_type"],  # AUTO | MORTGAGE | COMMERCIAL
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_created(entity: str) -> None:
    entities_created_counter.labels(entity=entity).inc()


def record_credit_created(credit_type: str) -> None:
    record_created("credit")
    credits_created_counter.labels(credit_type=credit_type).inc()


def record_validation_failure(entity: str) -> None:
    validation_failures_counter.labels(entity=entity).inc()

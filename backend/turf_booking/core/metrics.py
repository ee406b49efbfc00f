"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Admission metrics
admission_requests = Counter(
    'slot_admission_requests_total',
    'Slot admission requests by kind and outcome',
    ['kind', 'result']  # booking/block x committed, slot_occupied, forbidden, invalid_request, not_found
)

admission_latency = Histogram(
    'slot_admission_latency_seconds',
    'End-to-end slot admission latency',
    ['kind'],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
)

# Interval store metrics
commit_operations = Counter(
    'interval_commit_operations_total',
    'Interval store commit outcomes',
    ['result']  # committed, conflict, retry, exhausted
)

slot_lock_wait = Histogram(
    'slot_lock_wait_seconds',
    'Time spent waiting for the per-(turf, date) slot lock',
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0]
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)

redis_connection_errors = Counter(
    'redis_connection_errors_total',
    'Redis connection errors'
)


def metrics_endpoint() -> Response:
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_admission(kind: str, result: str):
    """Record an admission outcome. Result: committed or an error code."""
    admission_requests.labels(kind=kind, result=result).inc()


def record_commit(result: str):
    commit_operations.labels(result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()

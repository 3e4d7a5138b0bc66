"""
Prometheus metrics for the scheduling core.

Service timings come from the @measure_operation decorator on BaseService;
domain counters are incremented by the services at the point a row is written.
"""

from typing import Optional, cast

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

# Custom registry so repeated test imports never collide with the default one
REGISTRY = CollectorRegistry()

service_operation_duration_seconds = Histogram(
    "tutorhub_service_operation_duration_seconds",
    "Service operation duration in seconds",
    ["service", "operation"],
    registry=REGISTRY,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

service_operations_total = Counter(
    "tutorhub_service_operations_total",
    "Total number of service operations",
    ["service", "operation", "status"],
    registry=REGISTRY,
)

errors_total = Counter(
    "tutorhub_errors_total",
    "Total number of errors",
    ["service", "operation", "error_type"],
    registry=REGISTRY,
)

sessions_created_total = Counter(
    "tutorhub_sessions_created_total",
    "Sessions inserted into the calendar",
    ["source"],
    registry=REGISTRY,
)

bookings_created_total = Counter(
    "tutorhub_bookings_created_total",
    "Confirmed bookings inserted",
    ["source"],
    registry=REGISTRY,
)

session_requests_reviewed_total = Counter(
    "tutorhub_session_requests_reviewed_total",
    "Admin reviews of tutor session requests",
    ["request_type", "outcome"],
    registry=REGISTRY,
)

room_tokens_issued_total = Counter(
    "tutorhub_room_tokens_issued_total",
    "Live-room access tokens minted",
    ["role"],
    registry=REGISTRY,
)


class PrometheusMetrics:
    """Manages Prometheus metrics collection and exposure."""

    @staticmethod
    def record_service_operation(
        service: str,
        operation: str,
        duration: float,
        status: str = "success",
        error_type: Optional[str] = None,
    ) -> None:
        """
        Record service operation metrics from @measure_operation decorator.

        Args:
            service: Service name (e.g., 'BookingService')
            operation: Operation/method name (e.g., 'book_session')
            duration: Operation duration in seconds
            status: Operation status ('success' or 'error')
            error_type: Type of error if status is 'error'
        """
        service_operation_duration_seconds.labels(service=service, operation=operation).observe(
            duration
        )
        service_operations_total.labels(service=service, operation=operation, status=status).inc()
        if status == "error" and error_type:
            errors_total.labels(service=service, operation=operation, error_type=error_type).inc()

    # Domain helpers
    @staticmethod
    def inc_sessions_created(source: str = "direct") -> None:
        sessions_created_total.labels(source=source).inc()

    @staticmethod
    def inc_bookings_created(source: str = "student", count: int = 1) -> None:
        if count > 0:
            bookings_created_total.labels(source=source).inc(count)

    @staticmethod
    def inc_request_reviewed(request_type: str, outcome: str) -> None:
        session_requests_reviewed_total.labels(request_type=request_type, outcome=outcome).inc()

    @staticmethod
    def inc_room_token_issued(role: str) -> None:
        room_tokens_issued_total.labels(role=role).inc()

    @staticmethod
    def get_metrics() -> bytes:
        """Generate Prometheus metrics in exposition format."""
        return cast(bytes, generate_latest(REGISTRY))

    @staticmethod
    def get_content_type() -> str:
        """Get the content type for Prometheus metrics."""
        return cast(str, CONTENT_TYPE_LATEST)


prometheus_metrics = PrometheusMetrics()

"""
Prometheus scrape endpoint.

Endpoints:
    GET /metrics/prometheus → Exposition-format metrics
"""

from fastapi import APIRouter, Response

from ...monitoring.prometheus_metrics import prometheus_metrics

router = APIRouter(tags=["monitoring"])


@router.get("/prometheus", include_in_schema=False)
def prometheus_scrape() -> Response:
    return Response(
        content=prometheus_metrics.get_metrics(),
        media_type=prometheus_metrics.get_content_type(),
    )

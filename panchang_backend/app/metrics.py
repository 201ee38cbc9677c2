"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP de l'API et celles des appels au fournisseur astronomique
distant (volumes par statut et latences par endpoint).
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Fournisseur astronomique / géocodage
PROVIDER_REQUESTS = Counter(
    "provider_requests_total",
    "Total requests sent to the astronomical data provider",
    ["endpoint", "status"],
)
PROVIDER_LATENCY = Histogram(
    "provider_request_duration_seconds",
    "Latency of astronomical data provider requests",
    ["endpoint"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
SLUG_RESOLUTIONS = Counter(
    "slug_resolutions_total",
    "Slug resolutions by outcome",
    ["outcome"],
)


def route_label(request: Request) -> str:
    """Gabarit de route (ex: /api/panchang/{slug}) pour limiter la cardinalité des labels."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or "unmatched"


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware Prometheus: comptage des requêtes et latence par gabarit de route."""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route = route_label(request)
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response

"""Tests pour les métriques Prometheus.

Ce module teste que les métriques HTTP et celles du fournisseur sont exposées via /metrics, avec
le gabarit de route (et non le chemin brut) comme label.
"""

from fastapi.testclient import TestClient

from panchang_backend.app.main import app
from panchang_backend.core.http_constants import HTTP_OK


def test_metrics_exposed(wired_provider):
    """Teste que l'endpoint /metrics expose les métriques Prometheus."""
    c = TestClient(app)
    c.get("/api/places/delhi")
    c.get("/api/city-search", params={"q": "delhi"})
    r = c.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"http_requests_total" in r.content
    assert b'route="/api/places/{slug}"' in r.content
    assert b"provider_requests_total" in r.content
    assert b'endpoint="/geocode/search"' in r.content
    assert b"slug_resolutions_total" in r.content

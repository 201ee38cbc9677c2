"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : middlewares, gestionnaires d'erreurs,
routes et métriques du service de lieux et de fenêtres horaires.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, métriques)
- Monter les routers (santé, lieux, panchang, fêtes, sitemaps, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI

from panchang_backend.api.errors import register_error_handlers
from panchang_backend.api.routes_festivals import router as festivals_router
from panchang_backend.api.routes_health import router as health_router
from panchang_backend.api.routes_panchang import router as panchang_router
from panchang_backend.api.routes_places import router as places_router
from panchang_backend.api.routes_sitemaps import router as sitemaps_router
from panchang_backend.app.metrics import PrometheusMiddleware, metrics_router
from panchang_backend.core.container import container
from panchang_backend.core.logging import setup_logging
from panchang_backend.middlewares.request_id import RequestIDMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares utiles à la traçabilité
    - Publie les routes
    """
    setup_logging()
    settings = container.settings
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(places_router)
    app.include_router(panchang_router)
    app.include_router(festivals_router)
    app.include_router(sitemaps_router)
    app.include_router(metrics_router)
    return app


app = create_app()

"""
Routes liées aux lieux: autocomplétion distante, recherche locale, fiche et lieux voisins.

`/api/city-search` relaie le géocodage distant côté serveur (le navigateur n'appelle jamais le
fournisseur directement) et enrichit chaque résultat avec le registre local.
"""

import structlog
from fastapi import APIRouter, HTTPException, Query, Response
from fastapi.responses import JSONResponse

from panchang_backend.api.schemas import CitySearchResult, NearbyPlace, PlaceSummary
from panchang_backend.core.container import container
from panchang_backend.core.http_constants import HTTP_INTERNAL_SERVER_ERROR
from panchang_backend.domain.distance import distance_between
from panchang_backend.domain.entities import Place
from panchang_backend.domain.geo_matcher import MIN_QUERY_LENGTH
from panchang_backend.infra.http_clients import ProviderError

router = APIRouter(prefix="/api", tags=["places"])
log = structlog.get_logger(__name__)

CITY_SEARCH_CACHE_CONTROL = "public, max-age=3600"


def _summary(place: Place) -> PlaceSummary:
    return PlaceSummary(
        id=place.id,
        name=place.name,
        name_hindi=place.name_hindi,
        slug=place.slug,
        state=place.state,
        tier=place.tier,
        url=place.url("panchang"),
        url_hindi=place.url("panchang", "hi"),
    )


@router.get("/city-search", response_model=list[CitySearchResult])
async def city_search(response: Response, q: str = "", limit: int = 10):
    """
    Autocomplétion de villes via le géocodage distant.

    Paramètres:
    - q: texte saisi (moins de 2 caractères: liste vide)
    - limit: nombre de résultats, plafonné par `CITY_SEARCH_MAX_LIMIT`

    Retour: liste de `CitySearchResult`; en cas d'échec du fournisseur, HTTP 500 et liste vide.
    """
    query = q.strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    settings = container.settings
    capped = max(1, min(limit, settings.CITY_SEARCH_MAX_LIMIT))
    try:
        results = await container.resolver.search(
            query, priority_country=settings.DEFAULT_COUNTRY, limit=capped
        )
    except ProviderError as err:
        log.error("city_search_failed", query=query, status=err.status, error=err.message)
        return JSONResponse(status_code=HTTP_INTERNAL_SERVER_ERROR, content=[])

    response.headers["Cache-Control"] = CITY_SEARCH_CACHE_CONTROL
    return [
        CitySearchResult(
            id=r.id,
            name=r.name,
            name_hindi=r.name_hindi or "",
            state=r.state,
            slug=r.slug,
            latitude=r.latitude,
            longitude=r.longitude,
            tier=r.tier,
            has_page=r.has_page,
        )
        for r in results
    ]


@router.get("/places/search", response_model=list[PlaceSummary])
def search_local_places(q: str = "", limit: int = Query(default=10, ge=1, le=50)):
    """Recherche par nom dans le registre local (sans appel réseau)."""
    return [_summary(p) for p in container.registry.search(q, limit=limit)]


@router.get("/places/{slug}", response_model=PlaceSummary)
def get_place(slug: str):
    place = container.registry.get_by_slug(slug)
    if place is None:
        raise HTTPException(status_code=404, detail="Place not found")
    return _summary(place)


@router.get("/places/{slug}/nearby", response_model=list[NearbyPlace])
def get_nearby_places(
    slug: str,
    max_distance_km: float = Query(default=100.0, gt=0),
    limit: int = Query(default=5, ge=1, le=50),
):
    """Lieux du registre dans un rayon donné, du plus proche au plus lointain."""
    place = container.registry.get_by_slug(slug)
    if place is None:
        raise HTTPException(status_code=404, detail="Place not found")
    nearby = container.registry.nearby(place, max_distance_km=max_distance_km, limit=limit)
    return [
        NearbyPlace(
            **_summary(p).model_dump(),
            distance_km=round(distance_between(place, p), 1),
        )
        for p in nearby
    ]

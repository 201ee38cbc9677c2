"""
Routes des fêtes hindoues.

Les listes viennent telles quelles du fournisseur. Un slug optionnel est résolu (avec repli sur
le lieu par défaut) pour transmettre l'identifiant de lieu au fournisseur.
"""

from fastapi import APIRouter, Query

from panchang_backend.api.schemas import FestivalsResponse
from panchang_backend.core.container import container
from panchang_backend.domain.entities import ResolvedLocation

router = APIRouter(prefix="/api/festivals", tags=["festivals"])

DEFAULT_UPCOMING_LIMIT = 10
MAX_UPCOMING_LIMIT = 50


async def _location(slug: str | None) -> ResolvedLocation | None:
    if not slug:
        return None
    return await container.resolver.resolve_or_default(
        slug, priority_country=container.settings.DEFAULT_COUNTRY
    )


# Déclarée avant /{year} pour que "upcoming" ne soit pas lu comme une année.
@router.get("/upcoming", response_model=FestivalsResponse)
async def upcoming_festivals(
    limit: int = Query(DEFAULT_UPCOMING_LIMIT, ge=1, le=MAX_UPCOMING_LIMIT),
    slug: str | None = None,
):
    """Prochaines fêtes, éventuellement pour un lieu."""
    location = await _location(slug)
    festivals = await container.provider.get_upcoming_festivals(
        limit, location.id if location else None
    )
    return FestivalsResponse(location=location, festivals=festivals)


@router.get("/{year}", response_model=FestivalsResponse)
async def festivals_for_year(year: int, slug: str | None = None):
    location = await _location(slug)
    festivals = await container.provider.get_festivals(year, location.id if location else None)
    return FestivalsResponse(location=location, year=year, festivals=festivals)

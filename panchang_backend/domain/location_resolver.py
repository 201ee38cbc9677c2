"""
Résolution d'un slug, d'un texte libre ou de coordonnées vers un lieu canonique.

Le géocodage distant fait autorité pour l'existence du lieu; le registre local l'enrichit
(slug curé, niveau, noms hindi, existence d'une page dédiée) lorsqu'une entrée correspond.

Contrat « résoudre ou défaut »:
- `resolve_by_slug` ne lève jamais: toute erreur du fournisseur devient « pas de correspondance »
  (None), car la résolution alimente des pages qui doivent s'afficher malgré tout;
- `resolve_or_default` retombe sur le lieu par défaut du registre;
- `search` et `reverse_geocode` propagent `ProviderError` pour que l'appelant distingue
  « aucune donnée » de « fournisseur indisponible ».
"""

from __future__ import annotations

import structlog

from panchang_backend.app.metrics import SLUG_RESOLUTIONS
from panchang_backend.core.http_constants import DEFAULT_SEARCH_LIMIT, SLUG_RESOLUTION_LIMIT
from panchang_backend.domain.entities import Place, ResolvedLocation
from panchang_backend.domain.slugs import from_slug, to_slug
from panchang_backend.infra.http_clients import AstroProviderClient, ProviderError
from panchang_backend.infra.place_registry import PlaceRegistry

log = structlog.get_logger(__name__)


def location_from_place(place: Place) -> ResolvedLocation:
    """Lieu résolu construit uniquement à partir d'une entrée du registre."""
    return ResolvedLocation(
        id=place.id,
        name=place.name,
        name_hindi=place.name_hindi or None,
        state=place.state,
        state_hindi=place.state_hindi or None,
        country=place.country,
        latitude=place.latitude,
        longitude=place.longitude,
        timezone=place.timezone,
        slug=place.slug,
        tier=place.tier,
        has_page=True,
    )


class LocationResolver:
    """Réconcilie le géocodage distant avec le registre local des lieux."""

    def __init__(self, provider: AstroProviderClient, registry: PlaceRegistry):
        self.provider = provider
        self.registry = registry

    def enrich(self, location: ResolvedLocation) -> ResolvedLocation:
        """Complète un résultat distant avec l'entrée locale de même identifiant, si elle existe."""
        local = self.registry.get_by_id(location.id)
        if local is None:
            return location.model_copy(
                update={"slug": location.slug or to_slug(location.name), "has_page": False}
            )
        return location.model_copy(
            update={
                "name_hindi": location.name_hindi or local.name_hindi or None,
                "state": local.state or location.state,
                "state_hindi": local.state_hindi or None,
                "slug": local.slug,
                "tier": local.tier,
                "has_page": True,
            }
        )

    async def search(
        self,
        query: str,
        country: str | None = None,
        priority_country: str | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[ResolvedLocation]:
        """Recherche distante enrichie. Lève `ProviderError` en cas d'échec du fournisseur."""
        results = await self.provider.search_places(
            query, country=country, priority_country=priority_country, limit=limit
        )
        return [self.enrich(r) for r in results]

    async def reverse_geocode(self, lat: float, lng: float) -> ResolvedLocation | None:
        """Lieu le plus proche des coordonnées, enrichi. Lève `ProviderError` en cas d'échec."""
        result = await self.provider.reverse_geocode(lat, lng)
        return self.enrich(result) if result else None

    async def resolve_by_slug(
        self, slug: str, priority_country: str | None = None
    ) -> ResolvedLocation | None:
        """
        Résout un slug d'URL en lieu canonique, ou None.

        Démarche:
        - slug vide: None
        - slug -> texte de recherche ("new-delhi" -> "new delhi")
        - recherche distante limitée à 5 candidats
        - préférence au candidat dont le nom re-slugifié égale le slug, sinon le premier
        - toute `ProviderError` (délai, réseau, statut non-2xx) est journalisée et donne None
        """
        if not slug:
            return None

        query = from_slug(slug)
        try:
            results = await self.search(
                query, priority_country=priority_country, limit=SLUG_RESOLUTION_LIMIT
            )
        except ProviderError as err:
            SLUG_RESOLUTIONS.labels("provider_error").inc()
            log.warning(
                "slug_resolution_failed",
                slug=slug,
                status=err.status,
                code=err.code,
                error=err.message,
            )
            return None

        if not results:
            SLUG_RESOLUTIONS.labels("no_match").inc()
            return None

        exact = next((r for r in results if to_slug(r.name) == slug), None)
        SLUG_RESOLUTIONS.labels("exact" if exact else "first").inc()
        return exact or results[0]

    async def resolve_or_default(
        self, slug: str, priority_country: str | None = None
    ) -> ResolvedLocation:
        """
        Résout un slug avec repli sur le lieu par défaut du registre.

        Une entrée locale au slug identique est utilisée directement quand la résolution distante
        n'aboutit pas, avant le repli sur le lieu par défaut.
        """
        resolved = await self.resolve_by_slug(slug, priority_country=priority_country)
        if resolved is not None:
            return resolved
        local = self.registry.get_by_slug(slug)
        if local is not None:
            return location_from_place(local)
        log.info("slug_resolution_default", slug=slug, default=self.registry.default_slug)
        return location_from_place(self.registry.default_place())

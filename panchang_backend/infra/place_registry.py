"""Registre local des lieux basé sur un fichier JSON.

Ce module charge une seule fois le jeu de données curé des lieux (villes avec slug, noms hindi et
niveau de popularité) et l'expose en lecture seule, indexé par identifiant et par slug.
"""

import json
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import MappingProxyType

import structlog

from panchang_backend.domain.distance import (
    DEFAULT_MAX_DISTANCE_KM,
    DEFAULT_NEARBY_LIMIT,
    nearby_places,
)
from panchang_backend.domain.entities import Place
from panchang_backend.domain.geo_matcher import (
    DEFAULT_SCORING,
    DEFAULT_SEARCH_LIMIT,
    ScoringPolicy,
    search_places,
)

DEFAULT_PLACES_PATH = Path(__file__).with_name("places.json")

log = structlog.get_logger(__name__)


class PlaceRegistry:
    """Collection immuable de `Place`, indexée par id et par slug.

    Les identifiants et les slugs doivent être uniques; un doublon est refusé au chargement.
    """

    def __init__(self, places: Iterable[Place], default_slug: str = "delhi"):
        """Construit les index et vérifie l'unicité des clés.

        Paramètres:
        - places: lieux dans l'ordre du jeu de données (l'ordre départage les égalités de score).
        - default_slug: slug du lieu utilisé quand aucune résolution n'aboutit.
        """
        self._places: tuple[Place, ...] = tuple(places)
        by_id: dict[int, Place] = {}
        by_slug: dict[str, Place] = {}
        for place in self._places:
            if place.id in by_id:
                raise ValueError(f"identifiant de lieu dupliqué: {place.id}")
            if place.slug in by_slug:
                raise ValueError(f"slug de lieu dupliqué: {place.slug}")
            by_id[place.id] = place
            by_slug[place.slug] = place
        self._by_id = MappingProxyType(by_id)
        self._by_slug = MappingProxyType(by_slug)
        self.default_slug = default_slug

    @classmethod
    def from_json(cls, path: str | Path | None = None, default_slug: str = "delhi") -> "PlaceRegistry":
        """Charge le registre depuis un fichier JSON (liste d'objets camelCase)."""
        source = Path(path) if path else DEFAULT_PLACES_PATH
        with open(source, encoding="utf-8") as f:
            raw = json.load(f)
        registry = cls((Place.model_validate(item) for item in raw), default_slug=default_slug)
        log.info("place_registry_loaded", path=str(source), places=len(registry))
        return registry

    def __len__(self) -> int:
        return len(self._places)

    def __iter__(self) -> Iterator[Place]:
        return iter(self._places)

    def all(self) -> list[Place]:
        return list(self._places)

    def get_by_id(self, place_id: int) -> Place | None:
        return self._by_id.get(place_id)

    def get_by_slug(self, slug: str) -> Place | None:
        return self._by_slug.get(slug)

    def get_by_name(self, name: str) -> Place | None:
        """Recherche par nom anglais (insensible à la casse) ou nom hindi exact."""
        lower = name.lower()
        for place in self._places:
            if place.name.lower() == lower or place.name_hindi == name:
                return place
        return None

    def is_valid_slug(self, slug: str) -> bool:
        return slug in self._by_slug

    def popular(self, max_tier: int = 1) -> list[Place]:
        """Lieux de niveau inférieur ou égal à `max_tier` (1 = métropoles)."""
        return [p for p in self._places if p.tier <= max_tier]

    def by_tier(self, tier: int) -> list[Place]:
        return [p for p in self._places if p.tier == tier]

    def by_population(self, limit: int | None = None) -> list[Place]:
        ranked = sorted(self._places, key=lambda p: p.population, reverse=True)
        return ranked[:limit] if limit else ranked

    def by_state(self, state: str) -> list[Place]:
        lower = state.lower()
        return [p for p in self._places if p.state.lower() == lower]

    def default_place(self) -> Place:
        """Lieu par défaut: `default_slug` s'il existe, sinon la première entrée."""
        place = self._by_slug.get(self.default_slug)
        if place is not None:
            return place
        if not self._places:
            raise LookupError("registre de lieux vide")
        return self._places[0]

    def search(
        self,
        query: str,
        limit: int = DEFAULT_SEARCH_LIMIT,
        policy: ScoringPolicy = DEFAULT_SCORING,
    ) -> list[Place]:
        return search_places(self._places, query, limit=limit, policy=policy)

    def nearby(
        self,
        place: Place,
        max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
        limit: int = DEFAULT_NEARBY_LIMIT,
    ) -> list[Place]:
        return nearby_places(self._places, place, max_distance_km=max_distance_km, limit=limit)

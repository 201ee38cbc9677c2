# Schémas Pydantic exposés par l'API (réponses).

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from panchang_backend.domain.entities import ResolvedLocation, Tier


class _CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CitySearchResult(_CamelResponse):
    """Résultat de l'autocomplétion de villes.

    Champs:
    - id: int (identifiant du fournisseur)
    - name / name_hindi: str
    - state: str (état curé si la ville est au registre)
    - slug: str (slug curé, sinon dérivé du nom)
    - latitude / longitude: float
    - tier: niveau de popularité, absent hors registre
    - has_page: bool (une page dédiée existe)
    """

    id: int
    name: str
    name_hindi: str = ""
    state: str
    slug: str
    latitude: float
    longitude: float
    tier: Tier | None = None
    has_page: bool = False


class PlaceSummary(_CamelResponse):
    id: int
    name: str
    name_hindi: str
    slug: str
    state: str
    tier: Tier
    url: str
    url_hindi: str


class NearbyPlace(PlaceSummary):
    distance_km: float


class DailyWindowsResponse(_CamelResponse):
    """Réponse panchang du jour pour un lieu.

    Champs:
    - location: lieu résolu (ou lieu par défaut)
    - datetime: instant demandé au fournisseur (heure locale du lieu)
    - now: heure locale courante au format "hh:mm AM/PM"
    - panchang / astronomical: charges utiles du fournisseur, inchangées
    - muhurta: fenêtres annotées avec `isActive`
    - active_windows: noms des fenêtres actives
    """

    location: ResolvedLocation
    datetime: str
    now: str
    panchang: dict[str, Any]
    astronomical: dict[str, Any]
    muhurta: dict[str, Any]
    active_windows: list[str] = Field(default_factory=list)


class ChoghadiyaResponse(_CamelResponse):
    location: ResolvedLocation
    datetime: str
    now: str
    day: list[dict[str, Any]]
    night: list[dict[str, Any]]


class AstronomicalResponse(_CamelResponse):
    location: ResolvedLocation
    datetime: str
    now: str
    sun: dict[str, Any]
    moon: dict[str, Any]


class FestivalsResponse(_CamelResponse):
    """Fêtes renvoyées par le fournisseur, inchangées.

    Champs:
    - location: lieu résolu si un slug a été fourni, sinon absent
    - year: année demandée (absente pour les fêtes à venir)
    - festivals: liste brute (id, name, nameHindi, date, dateIso, type...)
    """

    location: ResolvedLocation | None = None
    year: int | None = None
    festivals: list[dict[str, Any]] = Field(default_factory=list)

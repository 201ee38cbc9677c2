"""
Entités du domaine métier.

Ce module définit les modèles de données principaux: lieux du registre local, lieux résolus via le
géocodage distant, fenêtres horaires (muhurta, choghadiya) et agrégat journalier.

Les modèles acceptent et produisent les clés camelCase du fournisseur (`nameHindi`, `startIso`...)
tout en exposant des attributs snake_case côté Python.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Tier = Literal[1, 2, 3]
Lang = Literal["en", "hi"]
PeriodType = Literal["shubh", "ashubh", "neutral"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Place(_CamelModel):
    """Entrée du registre local: lieu curé avec slug et niveau de popularité."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    name: str
    name_hindi: str = ""
    slug: str
    state: str
    state_hindi: str = ""
    country: str
    latitude: float
    longitude: float
    timezone: str
    population: int = Field(default=0, ge=0)
    tier: Tier = 3

    def display_name(self) -> str:
        """Nom affiché « Ville, État »."""
        return f"{self.name}, {self.state}"

    def display_name_hindi(self) -> str:
        return f"{self.name_hindi}, {self.state_hindi}"

    def bilingual_name(self) -> str:
        """Nom bilingue « हिंदी (English) »."""
        return f"{self.name_hindi} ({self.name})"

    def url(self, page_type: str, lang: Lang = "en") -> str:
        """URL de la page du lieu; l'anglais n'a pas de préfixe de langue."""
        if lang == "en":
            return f"/{page_type}/{self.slug}"
        return f"/{lang}/{page_type}/{self.slug}"

    def coordinates(self) -> dict[str, Any]:
        """Coordonnées au format attendu par les appels au fournisseur."""
        return {"lat": self.latitude, "lng": self.longitude, "tz": self.timezone}


class ResolvedLocation(_CamelModel):
    """Lieu canonique issu d'une résolution (slug, texte libre ou coordonnées).

    `tier` est absent lorsque le lieu n'existe que dans l'index distant; `has_page` indique qu'une
    entrée du registre local (et donc une page dédiée) existe.
    """

    id: int
    name: str
    name_hindi: str | None = None
    state: str = ""
    state_hindi: str | None = None
    country: str = ""
    latitude: float
    longitude: float
    timezone: str
    slug: str
    tier: Tier | None = None
    has_page: bool = False


class TimeInterval(_CamelModel):
    """Fenêtre horaire nommée avec horaires affichables et instants ISO."""

    start: str
    end: str
    start_iso: str | None = None
    end_iso: str | None = None
    is_active: bool = False


class ChoghadiyaPeriod(TimeInterval):
    """Période de choghadiya classée favorable / défavorable / neutre."""

    name: str
    name_hindi: str = ""
    type: PeriodType = "neutral"


class AggregatedDailyData(BaseModel):
    """Panchang, données astronomiques et muhurta pour un couple (lieu, instant).

    Les trois charges utiles sont conservées telles que renvoyées par le fournisseur.
    """

    location_id: int
    datetime_iso: str
    panchang: dict[str, Any]
    astronomical: dict[str, Any]
    muhurta: dict[str, Any]

"""
Classement des lieux du registre local par similarité de nom et popularité.

Objectif: à partir d'une requête libre, attribuer à chaque lieu un score additif
(exact / préfixe / contient, sur le nom principal et le nom hindi) augmenté d'un bonus de
popularité, puis retourner les meilleurs candidats.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from panchang_backend.domain.entities import Place

MIN_QUERY_LENGTH = 2
DEFAULT_SEARCH_LIMIT = 10


@dataclass(frozen=True)
class ScoringPolicy:
    """Table des bonus appliqués par `score_place`."""

    exact: int = 100
    prefix: int = 50
    contains: int = 25
    tier_bonus: Mapping[int, int] = field(
        default_factory=lambda: MappingProxyType({1: 10, 2: 5, 3: 0})
    )
    # False: le bonus de popularité s'ajoute même sans correspondance de nom
    tier_bonus_requires_match: bool = False


DEFAULT_SCORING = ScoringPolicy()


def score_place(place: Place, query: str, policy: ScoringPolicy = DEFAULT_SCORING) -> int:
    """
    Score d'un lieu pour une requête.

    Le nom principal est comparé sans tenir compte de la casse; le nom hindi (autre écriture) est
    comparé tel quel. Les critères se cumulent: une correspondance exacte vaut aussi préfixe et
    contient.
    """
    lower_query = query.lower()
    name = place.name.lower()
    localized = place.name_hindi

    score = 0
    if name == lower_query:
        score += policy.exact
    if localized == query:
        score += policy.exact

    if name.startswith(lower_query):
        score += policy.prefix
    if localized.startswith(query):
        score += policy.prefix

    if lower_query in name:
        score += policy.contains
    if query in localized:
        score += policy.contains

    if score or not policy.tier_bonus_requires_match:
        score += policy.tier_bonus.get(place.tier, 0)
    return score


def search_places(
    places: Iterable[Place],
    query: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
    policy: ScoringPolicy = DEFAULT_SCORING,
) -> list[Place]:
    """
    Retourne les lieux correspondant à `query`, meilleurs scores d'abord.

    - requête vide ou de moins de 2 caractères: liste vide, sans calcul de score
    - score nul: lieu exclu
    - égalités: ordre du registre conservé (tri stable)
    """
    if not query or len(query) < MIN_QUERY_LENGTH:
        return []

    scored = [(score_place(p, query, policy), p) for p in places]
    matches = [(s, p) for s, p in scored if s > 0]
    matches.sort(key=lambda item: item[0], reverse=True)
    return [p for _, p in matches[: max(0, limit)]]

"""
Distances orthodromiques et recherche des lieux voisins.

Formule de haversine sur une Terre sphérique de rayon 6371 km.
"""

import math
from collections.abc import Iterable

from panchang_backend.domain.entities import Place

EARTH_RADIUS_KM = 6371.0
DEFAULT_MAX_DISTANCE_KM = 100.0
DEFAULT_NEARBY_LIMIT = 5


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Distance en kilomètres entre deux points (degrés décimaux)."""
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def distance_between(a: Place, b: Place) -> float:
    return haversine_km(a.latitude, a.longitude, b.latitude, b.longitude)


def nearby_places(
    places: Iterable[Place],
    place: Place,
    max_distance_km: float = DEFAULT_MAX_DISTANCE_KM,
    limit: int = DEFAULT_NEARBY_LIMIT,
) -> list[Place]:
    """
    Lieux situés à moins de `max_distance_km` de `place`, du plus proche au plus lointain.

    Le lieu de référence (même identifiant) est exclu.
    """
    candidates = [
        (distance_between(place, other), other) for other in places if other.id != place.id
    ]
    within = [(d, p) for d, p in candidates if d <= max_distance_km]
    within.sort(key=lambda item: item[0])
    return [p for _, p in within[: max(0, limit)]]

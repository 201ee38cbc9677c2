"""Tests pour le registre local des lieux.

Ce module teste le chargement du jeu de données embarqué, l'unicité des clés et les accès par
identifiant, slug, nom, niveau et état.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from panchang_backend.domain.entities import Place
from panchang_backend.infra.place_registry import PlaceRegistry


def _raw(pid: int, slug: str, **extra: Any) -> dict[str, Any]:
    data = {
        "id": pid,
        "name": slug.title(),
        "nameHindi": "",
        "slug": slug,
        "state": "State",
        "stateHindi": "",
        "country": "IN",
        "latitude": 20.0,
        "longitude": 78.0,
        "timezone": "Asia/Kolkata",
        "population": 1000,
        "tier": 3,
    }
    data.update(extra)
    return data


def test_embedded_dataset_loads(registry: PlaceRegistry) -> None:
    assert len(registry) >= 20
    delhi = registry.get_by_slug("delhi")
    assert delhi is not None
    assert delhi.id == 1273294
    assert delhi.name_hindi == "दिल्ली"
    assert delhi.tier == 1


def test_embedded_dataset_keys_are_unique(registry: PlaceRegistry) -> None:
    places = registry.all()
    assert len({p.id for p in places}) == len(places)
    assert len({p.slug for p in places}) == len(places)


def test_duplicate_id_is_rejected() -> None:
    places = [Place.model_validate(_raw(1, "a")), Place.model_validate(_raw(1, "b"))]
    with pytest.raises(ValueError):
        PlaceRegistry(places)


def test_duplicate_slug_is_rejected() -> None:
    places = [Place.model_validate(_raw(1, "a")), Place.model_validate(_raw(2, "a"))]
    with pytest.raises(ValueError):
        PlaceRegistry(places)


def test_from_json_custom_path(tmp_path) -> None:
    path = tmp_path / "places.json"
    path.write_text(json.dumps([_raw(10, "alpha"), _raw(11, "beta", tier=1)]), encoding="utf-8")
    reg = PlaceRegistry.from_json(path, default_slug="beta")
    assert [p.slug for p in reg] == ["alpha", "beta"]
    assert reg.default_place().slug == "beta"


def test_place_rejects_invalid_tier_and_population() -> None:
    with pytest.raises(ValueError):
        Place.model_validate(_raw(1, "a", tier=4))
    with pytest.raises(ValueError):
        Place.model_validate(_raw(1, "a", population=-1))


def test_lookups(registry: PlaceRegistry) -> None:
    assert registry.get_by_id(1275339).slug == "mumbai"
    assert registry.get_by_id(42) is None
    assert registry.get_by_slug("atlantis") is None
    assert registry.get_by_name("MUMBAI").slug == "mumbai"
    assert registry.get_by_name("मुंबई").slug == "mumbai"
    assert registry.get_by_name("Atlantis") is None
    assert registry.is_valid_slug("navi-mumbai")
    assert not registry.is_valid_slug("navi mumbai")


def test_tiers_population_and_state(registry: PlaceRegistry) -> None:
    assert all(p.tier == 1 for p in registry.popular())
    assert {p.tier for p in registry.popular(max_tier=2)} == {1, 2}
    assert all(p.tier == 3 for p in registry.by_tier(3))
    top = registry.by_population(3)
    assert len(top) == 3
    assert top[0].population >= top[1].population >= top[2].population
    assert {p.slug for p in registry.by_state("maharashtra")} >= {"mumbai", "pune", "thane"}


def test_default_place_falls_back_to_first_entry() -> None:
    reg = PlaceRegistry([Place.model_validate(_raw(1, "solo"))], default_slug="delhi")
    assert reg.default_place().slug == "solo"


def test_default_place_on_empty_registry_raises() -> None:
    with pytest.raises(LookupError):
        PlaceRegistry([]).default_place()


def test_place_urls_and_names(registry: PlaceRegistry) -> None:
    delhi = registry.get_by_slug("delhi")
    assert delhi.url("panchang") == "/panchang/delhi"
    assert delhi.url("rahu-kaal", "hi") == "/hi/rahu-kaal/delhi"
    assert delhi.display_name() == "Delhi, Delhi"
    assert delhi.display_name_hindi() == "दिल्ली, दिल्ली"
    assert delhi.bilingual_name() == "दिल्ली (Delhi)"
    assert delhi.coordinates() == {"lat": 28.6139, "lng": 77.209, "tz": "Asia/Kolkata"}


def test_place_is_immutable(registry: PlaceRegistry) -> None:
    delhi = registry.get_by_slug("delhi")
    with pytest.raises(ValueError):
        delhi.name = "Dilli"

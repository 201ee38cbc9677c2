"""Tests pour la résolution slug / texte / coordonnées vers un lieu canonique.

Ce module teste le départage par slug exact, l'enrichissement par le registre local et le contrat
« résoudre ou défaut » (aucune erreur du fournisseur ne remonte de `resolve_by_slug`).
"""

from __future__ import annotations

import httpx
import pytest

from panchang_backend.domain.location_resolver import LocationResolver, location_from_place
from panchang_backend.infra.http_clients import ProviderError, to_resolved_location
from tests.fakes import (
    DELHI,
    MUMBAI,
    NAVI_MUMBAI,
    NEW_DELHI,
    FakeProviderAPI,
    envelope,
    fail_with,
    raise_exc,
)


def _resolver(registry, routes) -> tuple[LocationResolver, FakeProviderAPI]:
    api = FakeProviderAPI(routes)
    return LocationResolver(api.client(), registry), api


@pytest.mark.asyncio
async def test_exact_slug_match_wins_over_provider_order(registry) -> None:
    """Teste que "mumbai" choisit Mumbai même si Navi Mumbai arrive en premier."""
    resolver, api = _resolver(registry, {"/geocode/search": envelope(NAVI_MUMBAI, MUMBAI)})
    loc = await resolver.resolve_by_slug("mumbai", priority_country="IN")
    assert loc.name == "Mumbai"
    params = api.requests[0].url.params
    assert params["city"] == "mumbai"
    assert params["limit"] == "5"
    assert params["priorityCountry"] == "IN"


@pytest.mark.asyncio
async def test_resolved_location_is_enriched_from_registry(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/search": envelope(MUMBAI, NAVI_MUMBAI)})
    loc = await resolver.resolve_by_slug("mumbai")
    assert loc.id == 1275339
    assert loc.slug == "mumbai"
    assert loc.tier == 1
    assert loc.name_hindi == "मुंबई"
    assert loc.state_hindi == "महाराष्ट्र"
    assert loc.has_page is True


@pytest.mark.asyncio
async def test_remote_only_place_has_synthesized_slug_and_no_tier(registry) -> None:
    resolver, api = _resolver(registry, {"/geocode/search": envelope(DELHI, NEW_DELHI)})
    loc = await resolver.resolve_by_slug("new-delhi")
    assert api.requests[0].url.params["city"] == "new delhi"
    assert loc.name == "New Delhi"
    assert loc.slug == "new-delhi"
    assert loc.tier is None
    assert loc.has_page is False


@pytest.mark.asyncio
async def test_first_result_when_no_exact_slug(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/search": envelope(MUMBAI, NAVI_MUMBAI)})
    loc = await resolver.resolve_by_slug("bombay")
    assert loc.name == "Mumbai"


@pytest.mark.asyncio
async def test_empty_slug_is_no_match_without_request(registry) -> None:
    resolver, api = _resolver(registry, {"/geocode/search": envelope(MUMBAI)})
    assert await resolver.resolve_by_slug("") is None
    assert api.requests == []


@pytest.mark.asyncio
async def test_no_results_is_no_match(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/search": envelope()})
    assert await resolver.resolve_by_slug("atlantis") is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "route",
    [
        raise_exc(httpx.ReadTimeout("slow")),
        raise_exc(httpx.ConnectError("refused")),
        fail_with(500, "down"),
        lambda request: httpx.Response(200, json={"unexpected": True}),
    ],
)
async def test_provider_failures_become_no_match(registry, route) -> None:
    """Teste que délai, réseau, 5xx et enveloppe invalide donnent None, jamais une exception."""
    resolver, _ = _resolver(registry, {"/geocode/search": route})
    assert await resolver.resolve_by_slug("mumbai") is None


@pytest.mark.asyncio
async def test_search_propagates_provider_errors(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/search": raise_exc(httpx.ReadTimeout("slow"))})
    with pytest.raises(ProviderError) as exc:
        await resolver.search("mumbai")
    assert exc.value.status == 408


@pytest.mark.asyncio
async def test_reverse_geocode_is_enriched(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/reverse": envelope(DELHI)})
    loc = await resolver.reverse_geocode(28.61, 77.2)
    assert loc.slug == "delhi"
    assert loc.has_page is True


@pytest.mark.asyncio
async def test_reverse_geocode_propagates_provider_errors(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/reverse": fail_with(503, "maintenance")})
    with pytest.raises(ProviderError):
        await resolver.reverse_geocode(28.61, 77.2)


@pytest.mark.asyncio
async def test_resolve_or_default_prefers_local_slug_then_default(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/search": raise_exc(httpx.ConnectError("x"))})
    pune = await resolver.resolve_or_default("pune")
    assert pune.slug == "pune"
    assert pune.has_page is True
    fallback = await resolver.resolve_or_default("atlantis")
    assert fallback.slug == "delhi"
    assert fallback.id == 1273294


@pytest.mark.asyncio
async def test_resolve_or_default_uses_remote_result_first(registry) -> None:
    resolver, _ = _resolver(registry, {"/geocode/search": envelope(DELHI, NEW_DELHI)})
    loc = await resolver.resolve_or_default("new-delhi")
    assert loc.id == 1261481


def test_location_from_place(registry) -> None:
    loc = location_from_place(registry.get_by_slug("varanasi"))
    assert loc.slug == "varanasi"
    assert loc.tier == 2
    assert loc.has_page is True
    assert loc.timezone == "Asia/Kolkata"


def test_enrich_keeps_remote_only_results(registry) -> None:
    resolver = LocationResolver(FakeProviderAPI().client(), registry)
    loc = resolver.enrich(to_resolved_location(NEW_DELHI))
    assert loc.slug == "new-delhi"
    assert loc.has_page is False
    assert loc.tier is None

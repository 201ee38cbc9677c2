"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports `panchang_backend` en ajoutant la racine du
projet au sys.path, et fournit le registre embarqué ainsi qu'un faux fournisseur branché sur le
container global.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from panchang_backend...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tests.fakes import FakeProviderAPI, daily_routes  # noqa: E402

from panchang_backend.core.container import container  # noqa: E402
from panchang_backend.infra.place_registry import PlaceRegistry  # noqa: E402


@pytest.fixture(scope="session")
def registry() -> PlaceRegistry:
    """Registre des lieux embarqué (infra/places.json)."""
    return PlaceRegistry.from_json()


@pytest.fixture
def fake_api() -> FakeProviderAPI:
    return FakeProviderAPI(daily_routes())


@pytest.fixture
def wired_provider(fake_api):
    """Branche le faux fournisseur sur le container global le temps d'un test."""
    original = container.provider
    container.use_provider(fake_api.client())
    try:
        yield fake_api
    finally:
        container.use_provider(original)

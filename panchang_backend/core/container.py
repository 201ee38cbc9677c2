"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, registre des lieux, client du fournisseur, résolveur,
service journalier) et expose un singleton `container` utilisé par le reste de l'application.
Le registre est chargé une seule fois puis partagé en lecture seule.
"""

from panchang_backend.core.settings import Settings, get_settings
from panchang_backend.domain.daily_data import DailyDataService
from panchang_backend.domain.location_resolver import LocationResolver
from panchang_backend.infra.http_clients import AstroProviderClient
from panchang_backend.infra.place_registry import PlaceRegistry


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.registry = PlaceRegistry.from_json(
            self.settings.PLACES_DATA_PATH,
            default_slug=self.settings.DEFAULT_PLACE_SLUG,
        )
        self.provider = AstroProviderClient(
            base_url=self.settings.PROVIDER_API_URL,
            api_key=self.settings.PROVIDER_API_KEY,
            timeout_s=self.settings.PROVIDER_TIMEOUT_S,
        )
        self.resolver = LocationResolver(self.provider, self.registry)
        self.daily_data = DailyDataService(self.provider)

    def use_provider(self, provider: AstroProviderClient) -> None:
        """Remplace le client du fournisseur (tests, transport alternatif)."""
        self.provider = provider
        self.resolver = LocationResolver(provider, self.registry)
        self.daily_data = DailyDataService(provider)


container = Container()

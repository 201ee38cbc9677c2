"""Clients HTTP externes (panchang, muhurta, données astronomiques, géocodage).

Objectif du module
------------------
- Encapsuler les appels réseau vers le fournisseur astronomique distant.
- Appliquer un délai maximal à chaque appel et convertir toute défaillance (HTTP non-2xx,
  délai dépassé, réseau, JSON invalide) en `ProviderError` typée.

Les endpoints de géocodage sont servis à la racine de l'API, pas sous le préfixe de version
(`/v2`) des autres endpoints.
"""

from __future__ import annotations

import asyncio
import re
import time
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from panchang_backend.app.metrics import PROVIDER_LATENCY, PROVIDER_REQUESTS
from panchang_backend.core.http_constants import (
    DEFAULT_PROVIDER_TIMEOUT_S,
    DEFAULT_SEARCH_LIMIT,
    HTTP_BAD_GATEWAY,
    HTTP_REQUEST_TIMEOUT,
    HTTP_SERVICE_UNAVAILABLE,
    HTTP_STATUS_SUCCESS_MAX,
    HTTP_STATUS_SUCCESS_MIN,
)
from panchang_backend.domain.entities import ResolvedLocation
from panchang_backend.domain.slugs import to_slug

_VERSION_SUFFIX_RE = re.compile(r"/v2/?$")

Params = dict[str, str | int | float | bool | None]


class ProviderError(RuntimeError):
    """Erreur du fournisseur distant avec statut de type HTTP et code optionnel."""

    def __init__(self, message: str, status: int, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.code, "status": self.status}


def malformed_response(detail: str) -> ProviderError:
    """Réponse JSON illisible ou enveloppe incomplète."""
    return ProviderError(
        f"Malformed response from provider: {detail}",
        HTTP_BAD_GATEWAY,
        code="MALFORMED_RESPONSE",
    )


def _encode_params(params: Params) -> dict[str, str]:
    encoded: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded


def unwrap_envelope(raw: Any) -> list[dict[str, Any]]:
    """Extrait `data` de l'enveloppe `{success, data, meta}` du géocodage."""
    if not isinstance(raw, dict) or "data" not in raw:
        raise malformed_response("missing data envelope")
    if raw.get("success") is False:
        raise ProviderError(
            str(raw.get("message") or "Provider reported failure"),
            HTTP_BAD_GATEWAY,
            code=raw.get("code"),
        )
    data = raw["data"]
    if data is None:
        return []
    if not isinstance(data, list):
        raise malformed_response("data is not a list")
    return data


def to_resolved_location(raw: dict[str, Any]) -> ResolvedLocation:
    """Convertit un résultat brut (`locationId`, `name`...) en `ResolvedLocation`.

    Le slug est synthétisé depuis le nom; l'enrichissement par le registre local est fait plus haut.
    """
    try:
        name = raw["name"]
        return ResolvedLocation(
            id=raw["locationId"],
            name=name,
            state=raw.get("state") or "",
            country=raw.get("country") or "",
            latitude=raw["latitude"],
            longitude=raw["longitude"],
            timezone=raw["timezone"],
            slug=to_slug(name),
        )
    except (KeyError, TypeError, ValidationError) as err:
        raise malformed_response(f"invalid geocode result ({err})") from err


class AstroProviderClient:
    """Client asynchrone du fournisseur astronomique distant.

    Chaque appel ouvre un `httpx.AsyncClient` éphémère; aucune donnée n'est partagée entre
    requêtes, ce qui autorise les appels concurrents sans verrou.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout_s: float = DEFAULT_PROVIDER_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise le client.

        Args:
            base_url: URL versionnée de l'API (ex: http://localhost:3333/v2).
            api_key: Jeton bearer optionnel (jamais journalisé).
            timeout_s: Délai maximal par requête, en secondes.
            transport: Transport httpx alternatif (tests).
        """
        self.base_url = base_url.rstrip("/")
        self.root_url = _VERSION_SUFFIX_RE.sub("", self.base_url)
        self.api_key = api_key
        self.timeout_s = timeout_s
        self._transport = transport
        self._log = structlog.get_logger(__name__, component="astro_provider")

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def get_json(
        self,
        path: str,
        params: Params | None = None,
        *,
        root: bool = False,
        timeout_s: float | None = None,
    ) -> Any:
        """
        Exécute un GET JSON sur le fournisseur.

        Args:
            path: Chemin de l'endpoint (ex: "/panchang").
            params: Paramètres de requête; les valeurs None sont omises.
            root: Vrai pour les endpoints servis à la racine (géocodage).
            timeout_s: Délai spécifique, sinon celui du client.

        Returns:
            Any: Corps JSON décodé.

        Raises:
            ProviderError: Statut non-2xx, délai dépassé (408), erreur réseau ou JSON invalide.
        """
        url = f"{self.root_url if root else self.base_url}{path}"
        deadline = timeout_s or self.timeout_s
        status_label = "error"
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                headers=self._headers(),
                timeout=httpx.Timeout(deadline),
                transport=self._transport,
            ) as client:
                resp = await asyncio.wait_for(
                    client.get(url, params=_encode_params(params or {})), deadline
                )
            status_label = str(resp.status_code)
        except (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException) as exc:
            status_label = "timeout"
            self._log.warning("provider_timeout", path=path, timeout_s=deadline)
            raise ProviderError("Request timeout", HTTP_REQUEST_TIMEOUT) from exc
        except httpx.HTTPError as exc:
            self._log.error("provider_network_error", path=path, error=str(exc))
            raise ProviderError(
                f"Network error: {exc}", HTTP_SERVICE_UNAVAILABLE, code="NETWORK_ERROR"
            ) from exc
        finally:
            PROVIDER_REQUESTS.labels(path, status_label).inc()
            PROVIDER_LATENCY.labels(path).observe(time.perf_counter() - start)

        if not HTTP_STATUS_SUCCESS_MIN <= resp.status_code < HTTP_STATUS_SUCCESS_MAX:
            raise self._error_from_response(path, resp)

        try:
            return resp.json()
        except ValueError as exc:
            self._log.error("provider_malformed_json", path=path)
            raise malformed_response("invalid JSON body") from exc

    def _error_from_response(self, path: str, resp: httpx.Response) -> ProviderError:
        message = f"API error: {resp.reason_phrase}"
        code: str | None = None
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or message
            code = body.get("code")
        self._log.warning(
            "provider_error", path=path, status=resp.status_code, code=code, error=message
        )
        return ProviderError(message, resp.status_code, code)

    # ------------------------------------------------------------------
    # Panchang / muhurta / astronomie
    # ------------------------------------------------------------------

    async def get_panchang(self, location_id: int, datetime_iso: str) -> dict[str, Any]:
        """Tithi, nakshatra, yoga, karana, vara et masa."""
        return await self.get_json("/panchang", {"locationId": location_id, "datetime": datetime_iso})

    async def get_muhurta(self, location_id: int, datetime_iso: str) -> dict[str, Any]:
        """Fenêtres favorables/défavorables (rahu kaal, yamaganda, gulika kaal, abhijit...)."""
        return await self.get_json(
            "/panchang/muhurta", {"locationId": location_id, "datetime": datetime_iso}
        )

    async def get_choghadiya(self, location_id: int, datetime_iso: str) -> dict[str, Any]:
        return await self.get_json(
            "/panchang/choghadiya", {"locationId": location_id, "datetime": datetime_iso}
        )

    async def get_astronomical(self, location_id: int, datetime_iso: str) -> dict[str, Any]:
        return await self.get_json(
            "/astronomical", {"locationId": location_id, "datetime": datetime_iso}
        )

    async def get_sun_times(self, location_id: int, datetime_iso: str) -> dict[str, Any]:
        return await self.get_json(
            "/astronomical/sun", {"locationId": location_id, "datetime": datetime_iso}
        )

    async def get_moon_times(self, location_id: int, datetime_iso: str) -> dict[str, Any]:
        return await self.get_json(
            "/astronomical/moon", {"locationId": location_id, "datetime": datetime_iso}
        )

    async def get_festivals(self, year: int, location_id: int | None = None) -> list[dict[str, Any]]:
        return await self.get_json(f"/festivals/{year}", {"locationId": location_id or None})

    async def get_upcoming_festivals(
        self, limit: int = 10, location_id: int | None = None
    ) -> list[dict[str, Any]]:
        return await self.get_json(
            "/festivals/upcoming", {"limit": limit, "locationId": location_id or None}
        )

    # ------------------------------------------------------------------
    # Géocodage
    # ------------------------------------------------------------------

    async def search_places(
        self,
        query: str,
        country: str | None = None,
        priority_country: str | None = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[ResolvedLocation]:
        """Recherche de lieux par nom dans l'index distant."""
        params: Params = {
            "city": query,
            "limit": limit,
            "country": country or None,
            "priorityCountry": priority_country or None,
        }
        self._log.debug("geocode_search", query=query, country=country, limit=limit)
        raw = await self.get_json("/geocode/search", params, root=True)
        return [to_resolved_location(r) for r in unwrap_envelope(raw)]

    async def reverse_geocode(self, lat: float, lng: float) -> ResolvedLocation | None:
        """Lieu le plus proche de coordonnées, ou None."""
        raw = await self.get_json("/geocode/reverse", {"lat": lat, "lng": lng, "limit": 1}, root=True)
        data = unwrap_envelope(raw)
        if not data:
            return None
        return to_resolved_location(data[0])

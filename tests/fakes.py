"""
Fakes pour les tests unitaires.

Ce module fournit un faux fournisseur astronomique servi via `httpx.MockTransport`: les vraies
requêtes HTTP du client sont construites puis routées vers des réponses déterministes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx

from panchang_backend.infra.http_clients import AstroProviderClient

BASE_URL = "http://provider.test/v2"

Handler = Callable[[httpx.Request], httpx.Response]


def geocode_result(
    location_id: int,
    name: str,
    latitude: float,
    longitude: float,
    state: str = "",
    country: str = "IN",
    timezone: str = "Asia/Kolkata",
) -> dict[str, Any]:
    """Résultat brut de géocodage tel que renvoyé par le fournisseur."""
    return {
        "locationId": location_id,
        "name": name,
        "state": state,
        "country": country,
        "latitude": latitude,
        "longitude": longitude,
        "timezone": timezone,
    }


def envelope(*results: dict[str, Any]) -> dict[str, Any]:
    return {"success": True, "data": list(results), "meta": {"count": len(results)}}


MUMBAI = geocode_result(1275339, "Mumbai", 19.076, 72.8777, state="Maharashtra")
NAVI_MUMBAI = geocode_result(6619347, "Navi Mumbai", 19.033, 73.0297, state="Maharashtra")
DELHI = geocode_result(1273294, "Delhi", 28.6139, 77.209, state="Delhi")
NEW_DELHI = geocode_result(1261481, "New Delhi", 28.6358, 77.2245, state="Delhi")

PANCHANG = {"tithi": {"name": "Shukla Panchami"}, "nakshatra": {"name": "Rohini"}}
ASTRONOMICAL = {"sunrise": "07:14 AM", "sunset": "05:52 PM"}
MUHURTA = {
    "rahuKaal": {
        "start": "08:33 AM",
        "end": "09:53 AM",
        "startIso": "2024-01-15T08:33:00+05:30",
        "endIso": "2024-01-15T09:53:00+05:30",
        "isActive": False,
    },
    "yamaganda": {"start": "11:13 AM", "end": "12:33 PM", "isActive": True},
    "gulikaKaal": {"start": "01:53 PM", "end": "03:13 PM", "isActive": False},
    "abhijit": {"start": "12:12 PM", "end": "12:54 PM"},
}
CHOGHADIYA = {
    "day": [
        {"name": "Amrit", "nameHindi": "अमृत", "type": "shubh", "start": "07:14 AM", "end": "08:33 AM"},
        {"name": "Kaal", "nameHindi": "काल", "type": "ashubh", "start": "08:33 AM", "end": "09:53 AM"},
    ],
    "night": [
        {"name": "Labh", "nameHindi": "लाभ", "type": "shubh", "start": "05:52 PM", "end": "07:32 PM"},
        {"name": "Udveg", "nameHindi": "उद्वेग", "type": "ashubh", "start": "11:30 PM", "end": "01:10 AM"},
    ],
}
SUN = {"sunrise": "07:14 AM", "sunset": "05:52 PM", "solarNoon": "12:33 PM"}
MOON = {"moonrise": "10:41 AM", "moonset": "11:02 PM", "phase": "Waxing Crescent"}
FESTIVALS = [
    {
        "id": "makar-sankranti",
        "name": "Makar Sankranti",
        "nameHindi": "मकर संक्रांति",
        "date": "15 January 2024",
        "dateIso": "2024-01-15",
        "type": "major",
    },
    {
        "id": "vasant-panchami",
        "name": "Vasant Panchami",
        "nameHindi": "वसंत पंचमी",
        "date": "14 February 2024",
        "dateIso": "2024-02-14",
        "type": "major",
    },
]


class FakeProviderAPI:
    """
    Faux fournisseur: associe un chemin d'URL à une réponse JSON ou à un handler.

    Les requêtes reçues sont conservées dans `requests` pour inspection; un chemin inconnu
    renvoie 404 avec un corps d'erreur au format du fournisseur.
    """

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"message": "Location not found", "code": "NOT_FOUND"})
        if callable(route):
            return route(request)
        return httpx.Response(200, json=route)

    def client(self, **kwargs: Any) -> AstroProviderClient:
        return AstroProviderClient(BASE_URL, transport=httpx.MockTransport(self), **kwargs)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


def daily_routes() -> dict[str, Any]:
    """Routes d'un fournisseur sain pour les endpoints journaliers et le géocodage."""
    return {
        "/v2/panchang": PANCHANG,
        "/v2/astronomical": ASTRONOMICAL,
        "/v2/panchang/muhurta": MUHURTA,
        "/v2/panchang/choghadiya": CHOGHADIYA,
        "/v2/astronomical/sun": SUN,
        "/v2/astronomical/moon": MOON,
        "/v2/festivals/2024": FESTIVALS,
        "/v2/festivals/upcoming": FESTIVALS[1:],
        "/geocode/search": envelope(DELHI, NEW_DELHI),
    }


def fail_with(status: int, message: str = "boom", code: str | None = None) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        body: dict[str, Any] = {"message": message}
        if code:
            body["code"] = code
        return httpx.Response(status, json=body)

    return handler


def raise_exc(exc: Exception) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        raise exc

    return handler

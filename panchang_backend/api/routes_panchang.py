"""
Routes panchang et choghadiya par lieu.

Chaque route résout le slug (avec repli sur le lieu par défaut), interroge le fournisseur pour
l'instant demandé (par défaut: maintenant, heure locale du lieu) puis annote les fenêtres avec
`isActive` selon l'heure locale courante. Les erreurs du fournisseur sont converties en réponses
JSON par les gestionnaires de `panchang_backend.api.errors`.
"""

import datetime as dt
from zoneinfo import ZoneInfoNotFoundError

import structlog
from fastapi import APIRouter

from panchang_backend.api.schemas import (
    AstronomicalResponse,
    ChoghadiyaResponse,
    DailyWindowsResponse,
)
from panchang_backend.core.container import container
from panchang_backend.domain.daily_data import gather_fail_fast
from panchang_backend.domain.entities import ResolvedLocation
from panchang_backend.domain.time_windows import (
    active_muhurta,
    annotate_choghadiya,
    annotate_muhurta,
    format_clock,
    now_in_timezone,
)

router = APIRouter(prefix="/api", tags=["panchang"])
log = structlog.get_logger(__name__)

LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _local_now(location: ResolvedLocation) -> dt.datetime:
    default_tz = container.settings.DEFAULT_TIMEZONE
    tz_name = location.timezone or default_tz
    try:
        return now_in_timezone(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        # fuseau renvoyé par le géocodage inconnu de la base IANA locale
        log.warning(
            "timezone_unknown", location_id=location.id, timezone=tz_name, fallback=default_tz
        )
        return now_in_timezone(default_tz)


async def _resolve(slug: str) -> tuple[ResolvedLocation, dt.datetime]:
    location = await container.resolver.resolve_or_default(
        slug, priority_country=container.settings.DEFAULT_COUNTRY
    )
    return location, _local_now(location)


@router.get("/panchang/{slug}", response_model=DailyWindowsResponse)
async def get_panchang(slug: str, datetime: str | None = None):
    """
    Panchang, données astronomiques et muhurta du jour pour un lieu.

    Paramètres:
    - slug: slug du lieu (ex: "new-delhi")
    - datetime: instant ISO-8601 optionnel (défaut: maintenant, heure locale du lieu)
    """
    location, now = await _resolve(slug)
    requested = datetime or now.strftime(LOCAL_DATETIME_FORMAT)
    daily = await container.daily_data.get_daily_data(location.id, requested)
    return DailyWindowsResponse(
        location=location,
        datetime=requested,
        now=format_clock(now),
        panchang=daily.panchang,
        astronomical=daily.astronomical,
        muhurta=annotate_muhurta(daily.muhurta, now),
        active_windows=active_muhurta(daily.muhurta, now),
    )


@router.get("/choghadiya/{slug}", response_model=ChoghadiyaResponse)
async def get_choghadiya(slug: str, datetime: str | None = None):
    """Périodes de choghadiya (jour et nuit) annotées avec `isActive`."""
    location, now = await _resolve(slug)
    requested = datetime or now.strftime(LOCAL_DATETIME_FORMAT)
    payload = await container.provider.get_choghadiya(location.id, requested)
    annotated = annotate_choghadiya(payload, now)
    return ChoghadiyaResponse(
        location=location,
        datetime=requested,
        now=format_clock(now),
        day=annotated["day"],
        night=annotated["night"],
    )


@router.get("/astronomical/{slug}", response_model=AstronomicalResponse)
async def get_astronomical(slug: str, datetime: str | None = None):
    """Lever/coucher du soleil et de la lune pour un lieu (deux appels concurrents)."""
    location, now = await _resolve(slug)
    requested = datetime or now.strftime(LOCAL_DATETIME_FORMAT)
    provider = container.provider
    results = await gather_fail_fast(
        {
            "sun": provider.get_sun_times(location.id, requested),
            "moon": provider.get_moon_times(location.id, requested),
        }
    )
    return AstronomicalResponse(
        location=location,
        datetime=requested,
        now=format_clock(now),
        sun=results["sun"],
        moon=results["moon"],
    )

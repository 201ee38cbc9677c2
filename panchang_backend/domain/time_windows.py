"""
Classification des fenêtres horaires (rahu kaal, yamaganda, gulika kaal, abhijit, choghadiya).

Objectif: déterminer si un instant « maintenant » tombe dans une fenêtre [début, fin], y compris
les fenêtres qui franchissent minuit (ex: 10:00 PM - 06:00 AM).

La comparaison se fait en minutes depuis minuit (0-1439), pas en dates calendaires. Formats
acceptés: "hh:mm AM/PM" (format d'affichage du fournisseur), "HH:MM[:SS]" sur 24 heures, chaînes
ISO-8601 complètes, ainsi que les objets `datetime` / `time`. Tout autre format lève
`InvalidTimeFormat` plutôt que d'être mal interprété.
"""

from __future__ import annotations

import re
from datetime import datetime, time, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

import structlog

from panchang_backend.domain.entities import ChoghadiyaPeriod, TimeInterval

log = structlog.get_logger(__name__)

MINUTES_PER_DAY = 24 * 60

_TWELVE_HOUR_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2})?\s*([AaPp][Mm])\s*$")
_TWENTY_FOUR_HOUR_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})(?::\d{2}(?:\.\d+)?)?\s*$")

ClockValue = str | datetime | time

MUHURTA_WINDOWS = ("rahuKaal", "yamaganda", "gulikaKaal", "abhijit", "brahma")
CHOGHADIYA_SECTIONS = ("day", "night")


class InvalidTimeFormat(ValueError):
    """Chaîne horaire dans un format non reconnu."""


def _from_twelve_hour(hours: int, minutes: int, period: str, raw: str) -> int:
    if not 0 <= hours <= 12 or not 0 <= minutes <= 59:
        raise InvalidTimeFormat(f"heure hors limites: {raw!r}")
    if period == "PM" and hours != 12:
        hours += 12
    if period == "AM" and hours == 12:
        hours = 0
    return hours * 60 + minutes


def clock_minutes(value: ClockValue, tz: tzinfo | None = None) -> int:
    """
    Convertit une heure en minutes depuis minuit.

    Args:
        value: Heure affichable, ISO-8601, `datetime` ou `time`.
        tz: Fuseau cible pour les instants conscients du fuseau (optionnel).

    Returns:
        int: Minutes depuis minuit (0-1439).

    Raises:
        InvalidTimeFormat: Si la chaîne n'est dans aucun format reconnu.
    """
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.hour * 60 + value.minute
    if isinstance(value, time):
        return value.hour * 60 + value.minute
    if not isinstance(value, str):
        raise InvalidTimeFormat(f"type d'heure non supporté: {type(value).__name__}")

    match = _TWELVE_HOUR_RE.match(value)
    if match:
        return _from_twelve_hour(
            int(match.group(1)), int(match.group(2)), match.group(3).upper(), value
        )

    match = _TWENTY_FOUR_HOUR_RE.match(value)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if not 0 <= hours <= 23 or not 0 <= minutes <= 59:
            raise InvalidTimeFormat(f"heure hors limites: {value!r}")
        return hours * 60 + minutes

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError as err:
        raise InvalidTimeFormat(f"format horaire non reconnu: {value!r}") from err
    return clock_minutes(parsed, tz)


def _reference_tz(value: ClockValue) -> tzinfo | None:
    """Fuseau porté par l'instant de référence, s'il en a un."""
    if isinstance(value, datetime):
        return value.tzinfo
    if not isinstance(value, str):
        return None
    if _TWELVE_HOUR_RE.match(value) or _TWENTY_FOUR_HOUR_RE.match(value):
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).tzinfo
    except ValueError:
        return None


def is_overnight(start: ClockValue, end: ClockValue) -> bool:
    """Vrai si la fenêtre franchit minuit (fin antérieure au début sur l'horloge)."""
    return clock_minutes(start) > clock_minutes(end)


def is_time_in_range(current: ClockValue, start: ClockValue, end: ClockValue) -> bool:
    """
    Vérifie si `current` tombe dans [start, end], bornes incluses.

    Fenêtre diurne: start <= now <= end. Fenêtre de nuit (start > end): now >= start ou now <= end.

    Si `current` porte un fuseau, les bornes ISO à décalage explicite (ex: UTC "Z") sont d'abord
    ramenées dans ce fuseau; les horaires d'affichage restent lus tels quels.
    """
    tz = _reference_tz(current)
    now = clock_minutes(current, tz)
    start_min = clock_minutes(start, tz)
    end_min = clock_minutes(end, tz)
    if start_min > end_min:
        return now >= start_min or now <= end_min
    return start_min <= now <= end_min


def now_in_timezone(tz_name: str, now: datetime | None = None) -> datetime:
    """Instant courant (ou `now`) exprimé dans le fuseau IANA `tz_name`."""
    zone = ZoneInfo(tz_name)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        return now.replace(tzinfo=zone)
    return now.astimezone(zone)


def format_clock(value: datetime | time) -> str:
    """Format d'affichage du fournisseur: "07:05 AM"."""
    return value.strftime("%I:%M %p")


def classify_interval(interval: TimeInterval, now: ClockValue) -> TimeInterval:
    """Retourne une copie de la fenêtre annotée avec `is_active`.

    Les horaires affichables priment; les champs ISO servent de repli si l'affichage est illisible.
    """
    try:
        active = is_time_in_range(now, interval.start, interval.end)
    except InvalidTimeFormat:
        if not (interval.start_iso and interval.end_iso):
            raise
        active = is_time_in_range(now, interval.start_iso, interval.end_iso)
    return interval.model_copy(update={"is_active": active})


def _annotate_raw(raw: dict[str, Any], now: ClockValue, window: str) -> dict[str, Any]:
    annotated = dict(raw)
    try:
        interval = classify_interval(TimeInterval.model_validate(raw), now)
        annotated["isActive"] = interval.is_active
    except ValueError as err:
        # pydantic.ValidationError et InvalidTimeFormat sont des ValueError
        log.warning("time_window_unparseable", window=window, error=str(err))
        annotated["isActive"] = False
    return annotated


def annotate_muhurta(payload: dict[str, Any], now: ClockValue) -> dict[str, Any]:
    """
    Recalcule `isActive` pour chaque fenêtre d'une réponse muhurta.

    Les fenêtres absentes (abhijit, brahma sont optionnelles) et les clés inconnues sont recopiées
    telles quelles. Une fenêtre illisible est marquée inactive et journalisée.
    """
    result = dict(payload)
    for key in MUHURTA_WINDOWS:
        raw = payload.get(key)
        if isinstance(raw, dict):
            result[key] = _annotate_raw(raw, now, key)
    return result


def annotate_choghadiya(payload: dict[str, Any], now: ClockValue) -> dict[str, Any]:
    """Recalcule `isActive` pour les périodes de jour et de nuit d'une réponse choghadiya."""
    result = dict(payload)
    for section in CHOGHADIYA_SECTIONS:
        periods = payload.get(section) or []
        result[section] = [
            _annotate_raw(p, now, f"{section}:{p.get('name', '?')}")
            for p in periods
            if isinstance(p, dict)
        ]
    return result


def choghadiya_periods(payload: dict[str, Any], now: ClockValue) -> dict[str, list[ChoghadiyaPeriod]]:
    """Version typée de `annotate_choghadiya` pour les collaborateurs Python."""
    out: dict[str, list[ChoghadiyaPeriod]] = {}
    for section in CHOGHADIYA_SECTIONS:
        out[section] = [
            classify_interval(ChoghadiyaPeriod.model_validate(p), now)
            for p in payload.get(section) or []
        ]
    return out


def active_muhurta(payload: dict[str, Any], now: ClockValue) -> list[str]:
    """Noms des fenêtres muhurta actives à l'instant `now`."""
    annotated = annotate_muhurta(payload, now)
    return [
        key
        for key in MUHURTA_WINDOWS
        if isinstance(annotated.get(key), dict) and annotated[key].get("isActive")
    ]

"""
Agrégation des données journalières d'un lieu (panchang + astronomie + muhurta).

Les trois requêtes partent en parallèle; la première erreur est relancée telle quelle et les
requêtes encore en vol sont annulées. Aucun agrégat partiel n'est jamais retourné.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any

import structlog

from panchang_backend.domain.entities import AggregatedDailyData
from panchang_backend.infra.http_clients import AstroProviderClient

log = structlog.get_logger(__name__)


def _failed(task: asyncio.Future) -> bool:
    return task.done() and not task.cancelled() and task.exception() is not None


async def gather_fail_fast(calls: dict[str, Awaitable[Any]]) -> dict[str, Any]:
    """
    Attend toutes les coroutines nommées, ou échoue dès la première erreur.

    En cas d'échec, les tâches restantes sont annulées et l'exception d'origine est relancée
    (si plusieurs échouent ensemble, l'ordre des clés départage).
    """
    tasks = {name: asyncio.ensure_future(call) for name, call in calls.items()}
    try:
        done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)
        failed = [name for name, task in tasks.items() if task in done and _failed(task)]
        if failed:
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)
            raise tasks[failed[0]].exception()
        return {name: task.result() for name, task in tasks.items()}
    finally:
        for task in tasks.values():
            if not task.done():
                task.cancel()


class DailyDataService:
    """Service métier pour l'agrégat journalier d'un lieu.

    Responsabilités:
    - Lancer les appels panchang, astronomie et muhurta en parallèle via `provider`.
    - Garantir l'atomicité: les trois sections ou une erreur.

    L'annotation `isActive` des fenêtres est laissée à l'appelant, car « maintenant » peut
    différer de l'instant demandé.
    """

    def __init__(self, provider: AstroProviderClient):
        self.provider = provider

    async def get_daily_data(self, location_id: int, datetime_iso: str) -> AggregatedDailyData:
        """Retourne l'agrégat ou lève la première `ProviderError` rencontrée."""
        try:
            results = await gather_fail_fast(
                {
                    "panchang": self.provider.get_panchang(location_id, datetime_iso),
                    "astronomical": self.provider.get_astronomical(location_id, datetime_iso),
                    "muhurta": self.provider.get_muhurta(location_id, datetime_iso),
                }
            )
        except Exception as err:
            log.error(
                "daily_data_failed",
                location_id=location_id,
                datetime=datetime_iso,
                error=str(err),
            )
            raise
        return AggregatedDailyData(location_id=location_id, datetime_iso=datetime_iso, **results)

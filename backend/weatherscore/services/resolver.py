# weatherscore/services/resolver.py
from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import Optional

import httpx
import structlog

from weatherscore.config import get_settings
from weatherscore.models import Resolution
from weatherscore.providers.base import UPSTREAM_ERRORS
from weatherscore.services.store import WeatherStore, default_store
from weatherscore.utils.dates import iso_day, utc_midnight
from weatherscore.utils.numeric import coerce_float

logger = structlog.get_logger(__name__)


class ResolutionExists(Exception):
    """A resolution is already stored for the requested day."""

    def __init__(self, target_date: datetime):
        super().__init__(f"Resolution already exists for {target_date.date().isoformat()}")
        self.target_date = target_date


async def fetch_actual_high(
    target_date: datetime | date,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[float]:
    """
    Observed daily maximum for the configured point from the Open-Meteo archive.

    Returns None when the archive has nothing for that day yet, or when the upstream
    call fails; the two cases differ only in what gets logged.
    """
    settings = get_settings()
    day = iso_day(target_date)
    url = f"{settings.OPEN_METEO_ARCHIVE_URL.rstrip('/')}/v1/archive"
    params = {
        "latitude": settings.LATITUDE,
        "longitude": settings.LONGITUDE,
        "start_date": day,
        "end_date": day,
        "daily": "temperature_2m_max",
        "temperature_unit": "fahrenheit",
        "timezone": settings.REFERENCE_TZ,
    }
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_S) as own_client:
                resp = await own_client.get(url, params=params)
        else:
            resp = await client.get(url, params=params)
        resp.raise_for_status()
        daily = resp.json().get("daily") or {}
        values = daily.get("temperature_2m_max") or []
    except UPSTREAM_ERRORS as exc:
        logger.warning("resolver.fetch_failed", target_date=day, exc_type=type(exc).__name__, error=str(exc))
        return None

    actual = coerce_float(values[0]) if values else None
    if actual is None:
        logger.info("resolver.no_data", target_date=day)
        return None
    logger.info("resolver.actual_high", target_date=day, actual_high=actual)
    return actual


async def resolve_weather(
    target_date: datetime | date,
    *,
    store: Optional[WeatherStore] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Resolution]:
    """Fetch and store the actual high for ``target_date``'s day. Safe to repeat."""
    store = store or default_store()
    actual = await fetch_actual_high(target_date, client=client)
    if actual is None:
        logger.info("resolver.skipped", target_date=iso_day(target_date), reason="no_data")
        return None

    normalized = utc_midnight(target_date)
    if await asyncio.to_thread(store.get_resolution, normalized) is not None:
        logger.info("resolver.already_resolved", target_date=normalized.isoformat())
        return None

    row = await asyncio.to_thread(store.create_resolution, normalized, actual)
    if row is not None:
        logger.info("resolver.resolved", target_date=normalized.isoformat(), actual_high=actual)
    return row


def add_manual_resolution(store: WeatherStore, target_date: datetime | date, actual_high: float) -> Resolution:
    """Store an operator-entered actual high; raises ResolutionExists on a resolved day."""
    normalized = utc_midnight(target_date)
    row = store.create_resolution(normalized, actual_high)
    if row is None:
        raise ResolutionExists(normalized)
    logger.info("resolver.manual", target_date=normalized.isoformat(), actual_high=float(actual_high))
    return row

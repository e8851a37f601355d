# weatherscore/services/collector.py
from __future__ import annotations

import asyncio
from datetime import date, datetime
from typing import List, Optional, Sequence

import httpx
import structlog
from sqlalchemy.exc import SQLAlchemyError

from weatherscore.config import get_settings
from weatherscore.observability.instrument import log_job
from weatherscore.observability.metrics import PROVIDER_RUNS
from weatherscore.providers import ForecastProvider, ProviderResult, default_providers
from weatherscore.providers.base import STATUS_FAILED
from weatherscore.services.store import WeatherStore, default_store
from weatherscore.utils.dates import iso_day, target_dates

logger = structlog.get_logger(__name__)


@log_job("weather.collect")
async def collect_forecasts(
    base_date: Optional[datetime | date] = None,
    *,
    store: Optional[WeatherStore] = None,
    providers: Optional[Sequence[ForecastProvider]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> List[ProviderResult]:
    """
    Fetch the rolling forecast window from every provider at once.

    Providers settle independently: one failing never stops the others, and
    provider failures are reported in the returned results rather than raised.
    Storage errors are re-raised once every provider has finished.
    """
    settings = get_settings()
    store = store or default_store()
    providers = list(providers) if providers is not None else default_providers(settings)
    dates = target_dates(base_date, settings.FORECAST_DAYS)

    logger.info("collector.start", dates=[iso_day(d) for d in dates], providers=[p.name for p in providers])

    outcomes = await asyncio.gather(
        *(p.run(dates, store, client=client) for p in providers),
        return_exceptions=True,
    )

    results: List[ProviderResult] = []
    storage_error: Optional[SQLAlchemyError] = None
    for provider, outcome in zip(providers, outcomes):
        if isinstance(outcome, ProviderResult):
            results.append(outcome)
            continue
        if isinstance(outcome, SQLAlchemyError) and storage_error is None:
            storage_error = outcome
        logger.error(
            "collector.provider_crashed",
            source=provider.name,
            exc_type=type(outcome).__name__,
            error=str(outcome),
        )
        PROVIDER_RUNS.labels(source=provider.name, status=STATUS_FAILED).inc()
        results.append(ProviderResult(provider.name, STATUS_FAILED, error=f"{type(outcome).__name__}: {outcome}"))

    for r in results:
        logger.info(
            "collector.provider_done",
            source=r.source,
            status=r.status,
            written=[d.isoformat() for d in r.written],
            error=r.error,
        )

    if storage_error is not None:
        raise storage_error
    return results

# weatherscore/providers/base.py
from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import httpx
import pandas as pd
import structlog

from weatherscore.config import Settings, get_settings
from weatherscore.observability.metrics import FORECASTS_WRITTEN, PROVIDER_RUNS
from weatherscore.services.store import WeatherStore
from weatherscore.utils.dates import iso_day, sample_day, utc_day
from weatherscore.utils.numeric import coerce_float

logger = structlog.get_logger(__name__)

# (provider timestamp string, temperature in F, raw item kept for audit)
Sample = Tuple[str, Any, Any]
# (provider calendar day, temperature or None, raw item)
KeyedSample = Tuple[date, Optional[float], Any]

STATUS_OK = "ok"
STATUS_EMPTY = "empty"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"

# Anything the upstream can throw at us that means "no usable data this run".
UPSTREAM_ERRORS = (httpx.HTTPError, KeyError, TypeError, ValueError, IndexError, AttributeError)


@dataclass
class ProviderResult:
    source: str
    status: str
    written: List[date] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAILED


def key_samples(samples: Iterable[Sample]) -> List[KeyedSample]:
    """Attach the provider calendar day to each sample, dropping unreadable timestamps."""
    keyed: List[KeyedSample] = []
    for raw_time, temp, item in samples:
        try:
            day = sample_day(raw_time)
        except (TypeError, ValueError, OverflowError):
            logger.info("provider.bad_timestamp", raw_time=str(raw_time))
            continue
        keyed.append((day, coerce_float(temp), item))
    return keyed


def items_by_day(keyed: Iterable[KeyedSample]) -> Dict[date, List[Any]]:
    grouped: Dict[date, List[Any]] = {}
    for day, _temp, item in keyed:
        grouped.setdefault(day, []).append(item)
    return grouped


def daily_highs(samples: Iterable[Sample]) -> Dict[date, float]:
    """Max temperature per provider calendar day; samples without a value or a readable time are dropped."""
    return _highs(key_samples(samples))


def _highs(keyed: Iterable[KeyedSample]) -> Dict[date, float]:
    rows = [{"day": day, "temp": temp} for day, temp, _item in keyed if temp is not None]
    if not rows:
        return {}
    df = pd.DataFrame(rows)
    highs = df.groupby("day", sort=False)["temp"].max()
    return {day: float(v) for day, v in highs.items()}


class ForecastProvider:
    """
    One upstream forecast source.

    Subclasses implement ``fetch_samples``; ``run`` owns the shared day matching,
    persistence and failure isolation.
    """

    name: str = ""
    requires_api_key: bool = False

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    @property
    def api_key(self) -> Optional[str]:
        return None

    async def fetch_samples(
        self, client: httpx.AsyncClient, target_dates: Sequence[datetime]
    ) -> List[Sample]:
        raise NotImplementedError

    def audit_payload(self, day: date, audit: Dict[date, List[Any]]) -> str:
        return json.dumps(audit.get(day, []), default=str)

    async def run(
        self,
        target_dates: Sequence[datetime],
        store: WeatherStore,
        client: Optional[httpx.AsyncClient] = None,
    ) -> ProviderResult:
        log = logger.bind(source=self.name)

        if self.requires_api_key and not self.api_key:
            log.warning("provider.skipped", reason="missing_api_key")
            PROVIDER_RUNS.labels(source=self.name, status=STATUS_SKIPPED).inc()
            return ProviderResult(self.name, STATUS_SKIPPED, error="missing api key")

        result = ProviderResult(self.name, STATUS_EMPTY)
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT_S) as own_client:
                    samples = await self.fetch_samples(own_client, target_dates)
            else:
                samples = await self.fetch_samples(client, target_dates)
            keyed = key_samples(samples)
            highs = _highs(keyed)
            audit = items_by_day(keyed)
        except UPSTREAM_ERRORS as exc:
            log.warning("provider.fetch_failed", exc_type=type(exc).__name__, error=str(exc))
            PROVIDER_RUNS.labels(source=self.name, status=STATUS_FAILED).inc()
            return ProviderResult(self.name, STATUS_FAILED, error=f"{type(exc).__name__}: {exc}")

        for target in target_dates:
            day = utc_day(target)
            high = highs.get(day)
            if high is None:
                log.info("provider.no_forecast", target_date=iso_day(day))
                continue
            await asyncio.to_thread(
                store.add_forecast,
                source=self.name,
                target_date=target,
                predicted_high=high,
                raw_response=self.audit_payload(day, audit),
            )
            FORECASTS_WRITTEN.labels(source=self.name).inc()
            result.written.append(day)
            log.info("provider.forecast_saved", target_date=iso_day(day), predicted_high=high)

        if result.written:
            result.status = STATUS_OK
        PROVIDER_RUNS.labels(source=self.name, status=result.status).inc()
        return result

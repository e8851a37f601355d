# weatherscore/services/accuracy.py
from __future__ import annotations

import math
from datetime import date
from typing import Dict, List, Optional

import structlog

from weatherscore.config import get_settings
from weatherscore.models import Forecast, Resolution
from weatherscore.observability.instrument import log_job
from weatherscore.schemas.weather import ForecastError, ModelAccuracy, ResolvedDay
from weatherscore.services.store import WeatherStore
from weatherscore.utils.dates import utc_day, utc_midnight

logger = structlog.get_logger(__name__)


def _resolutions_by_day(resolutions: List[Resolution]) -> Dict[date, Resolution]:
    by_day: Dict[date, Resolution] = {}
    for r in resolutions:
        by_day.setdefault(utc_day(r.target_date), r)
    return by_day


def _group_by_source(forecasts: List[Forecast]) -> Dict[str, List[Forecast]]:
    """Group preserving first-seen source order."""
    grouped: Dict[str, List[Forecast]] = {}
    for f in forecasts:
        grouped.setdefault(f.source, []).append(f)
    return grouped


def score_source(
    source: str,
    forecasts: List[Forecast],
    resolutions_by_day: Dict[date, Resolution],
    margin: float,
) -> Optional[ModelAccuracy]:
    """
    Accuracy of one source against the resolved days.

    Every forecast row is matched on its own, so a day collected several times
    contributes several errors. Returns None when nothing matched.
    """
    errors: List[float] = []
    within = 0
    for f in forecasts:
        res = resolutions_by_day.get(utc_day(f.target_date))
        if res is None:
            continue
        err = abs(float(f.predicted_high) - float(res.actual_high))
        errors.append(err)
        if err <= margin:
            within += 1

    if not errors:
        return None

    n = len(errors)
    mae = sum(errors) / n
    rmse = math.sqrt(sum(e * e for e in errors) / n)
    return ModelAccuracy(
        source=source,
        mae=round(mae, 2),
        rmse=round(rmse, 2),
        accuracy_percent=round(within * 100.0 / n, 1),
        total_forecasts=len(forecasts),
        total_resolved=n,
    )


@log_job("weather.accuracy")
def calculate_accuracy(store: WeatherStore) -> List[ModelAccuracy]:
    """Rank sources by mean absolute error, best first. Read-only."""
    resolutions = store.list_resolutions()
    if not resolutions:
        logger.info("accuracy.no_resolutions")
        return []

    margin = float(get_settings().ACCURACY_MARGIN)
    by_day = _resolutions_by_day(resolutions)

    results: List[ModelAccuracy] = []
    for source, rows in _group_by_source(store.list_forecasts()).items():
        scored = score_source(source, rows, by_day, margin)
        if scored is None:
            logger.info("accuracy.source_unmatched", source=source, forecasts=len(rows))
            continue
        results.append(scored)

    # list.sort is stable, so MAE ties keep first-seen source order
    results.sort(key=lambda m: m.mae)
    return results


def get_model_accuracy(store: WeatherStore, source: str) -> Optional[ModelAccuracy]:
    for row in calculate_accuracy(store):
        if row.source == source:
            return row
    return None


def forecast_errors(store: WeatherStore) -> List[ResolvedDay]:
    """Per resolved day (oldest first), every matching forecast and its error."""
    margin = float(get_settings().ACCURACY_MARGIN)
    by_day: Dict[date, List[Forecast]] = {}
    for f in store.list_forecasts():
        by_day.setdefault(utc_day(f.target_date), []).append(f)

    out: List[ResolvedDay] = []
    for res in store.list_resolutions():
        actual = float(res.actual_high)
        entries = []
        for f in by_day.get(utc_day(res.target_date), []):
            err = abs(float(f.predicted_high) - actual)
            entries.append(
                ForecastError(
                    source=f.source,
                    predicted_high=float(f.predicted_high),
                    error=round(err, 1),
                    within_margin=err <= margin,
                )
            )
        out.append(ResolvedDay(target_date=utc_midnight(res.target_date), actual_high=actual, forecasts=entries))
    return out

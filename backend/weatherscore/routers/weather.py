# weatherscore/routers/weather.py
from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi import status as http

from weatherscore.schemas.common import fail, meta_now, ok
from weatherscore.schemas.weather import (
    CollectIn,
    ForecastOut,
    ResolutionIn,
    ResolutionOut,
    ResolveIn,
)
from weatherscore.services.accuracy import calculate_accuracy, forecast_errors, get_model_accuracy
from weatherscore.services.collector import collect_forecasts
from weatherscore.services.resolver import ResolutionExists, add_manual_resolution, resolve_weather
from weatherscore.services.store import WeatherStore, default_store

router = APIRouter(prefix="/api/weather", tags=["weather"])


def get_store() -> WeatherStore:
    return default_store()


@router.post("/collect", status_code=http.HTTP_202_ACCEPTED)
async def trigger_collection(
    background: BackgroundTasks,
    body: Optional[CollectIn] = None,
    store: WeatherStore = Depends(get_store),
):
    start = body.start_date if body else None
    # Fire and forget: the response does not wait on the upstreams.
    background.add_task(collect_forecasts, start, store=store)
    return ok(
        data={"status": "accepted", "start_date": start},
        meta=meta_now(start_date=start.isoformat() if start else None),
        status_code=http.HTTP_202_ACCEPTED,
    )


@router.get("/forecasts")
def list_forecasts(
    limit: int = Query(100, ge=1, le=1000),
    store: WeatherStore = Depends(get_store),
):
    grouped: Dict[str, List[dict]] = {}
    for row in store.list_forecasts(limit=limit):
        grouped.setdefault(row.source, []).append(ForecastOut.model_validate(row).model_dump())
    return ok(data=grouped, meta=meta_now(limit=limit))


@router.delete("/forecasts")
def clear_forecasts(store: WeatherStore = Depends(get_store)):
    return ok(data={"deleted": store.clear_forecasts()}, meta=meta_now())


@router.get("/accuracy")
def read_accuracy(store: WeatherStore = Depends(get_store)):
    rows = calculate_accuracy(store)
    return ok(data=[r.model_dump() for r in rows], meta=meta_now())


@router.get("/accuracy/{source}")
def read_source_accuracy(source: str, store: WeatherStore = Depends(get_store)):
    row = get_model_accuracy(store, source)
    if row is None:
        return fail(
            "NOT_FOUND",
            f"No resolved forecasts for source '{source}'",
            status_code=http.HTTP_404_NOT_FOUND,
            meta=meta_now(source=source),
        )
    return ok(data=row.model_dump(), meta=meta_now(source=source))


@router.get("/errors")
def read_errors(store: WeatherStore = Depends(get_store)):
    days = forecast_errors(store)
    return ok(data=[d.model_dump() for d in days], meta=meta_now())


@router.get("/resolutions")
def list_resolutions(store: WeatherStore = Depends(get_store)):
    rows = store.list_resolutions(newest_first=True)
    return ok(data=[ResolutionOut.model_validate(r).model_dump() for r in rows], meta=meta_now())


@router.post("/resolution", status_code=http.HTTP_201_CREATED)
def create_resolution(body: ResolutionIn, store: WeatherStore = Depends(get_store)):
    try:
        row = add_manual_resolution(store, body.target_date, body.actual_high)
    except ResolutionExists as exc:
        return fail(
            "RESOLUTION_EXISTS",
            str(exc),
            status_code=http.HTTP_409_CONFLICT,
            details={"target_date": exc.target_date.isoformat()},
        )
    return ok(
        data=ResolutionOut.model_validate(row).model_dump(),
        meta=meta_now(),
        status_code=http.HTTP_201_CREATED,
    )


@router.post("/resolve")
async def trigger_resolve(body: ResolveIn, store: WeatherStore = Depends(get_store)):
    row = await resolve_weather(body.target_date, store=store)
    return ok(
        data={
            "target_date": body.target_date,
            "created": row is not None,
            "resolution": ResolutionOut.model_validate(row).model_dump() if row is not None else None,
        },
        meta=meta_now(),
    )

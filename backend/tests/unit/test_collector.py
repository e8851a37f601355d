import httpx
import pytest
from sqlalchemy.exc import OperationalError

from weatherscore.providers import (
    ForecastProvider,
    NWSProvider,
    OpenMeteoProvider,
    OpenWeatherProvider,
    ProviderResult,
)
from weatherscore.services.collector import collect_forecasts
from weatherscore.utils.dates import utc_day

from _helpers import BASE, failing_client, make_settings, mock_client

pytestmark = pytest.mark.anyio

OPEN_METEO = {
    "hourly": {
        "time": ["2025-11-19T13:00", "2025-11-20T13:00", "2025-11-21T13:00"],
        "temperature_2m": [50.0, 51.0, 52.0],
    }
}


def _all_providers():
    settings = make_settings(OPENWEATHER_API_KEY="k")
    return [NWSProvider(settings), OpenMeteoProvider(settings), OpenWeatherProvider(settings)]


class _CrashingProvider(ForecastProvider):
    name = "CRASH"

    def __init__(self, exc):
        super().__init__(make_settings())
        self.exc = exc

    async def run(self, target_dates, store, client=None):
        raise self.exc


class _RecordingProvider(ForecastProvider):
    name = "REC"

    def __init__(self):
        super().__init__(make_settings())
        self.seen = None

    async def run(self, target_dates, store, client=None):
        self.seen = list(target_dates)
        return ProviderResult(self.name, "empty")


async def test_every_provider_failing_still_resolves(store):
    calls = []
    async with failing_client(calls) as client:
        results = await collect_forecasts(BASE, store=store, providers=_all_providers(), client=client)

    assert {r.source: r.status for r in results} == {"NWS": "failed", "ECMWF": "failed", "OWM": "failed"}
    assert store.list_forecasts() == []
    assert len(calls) == 3


async def test_one_provider_failure_does_not_block_others(store):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/forecast":
            return httpx.Response(200, json=OPEN_METEO)
        return httpx.Response(503)

    async with mock_client(handler) as client:
        results = await collect_forecasts(BASE, store=store, providers=_all_providers(), client=client)

    statuses = {r.source: r.status for r in results}
    assert statuses == {"NWS": "failed", "ECMWF": "ok", "OWM": "failed"}
    rows = store.list_forecasts()
    assert {r.source for r in rows} == {"ECMWF"}
    assert sorted(utc_day(r.target_date).isoformat() for r in rows) == [
        "2025-11-19",
        "2025-11-20",
        "2025-11-21",
    ]


async def test_all_providers_get_the_same_noon_anchored_window(store):
    a, b = _RecordingProvider(), _RecordingProvider()
    await collect_forecasts(BASE, store=store, providers=[a, b])

    assert a.seen == b.seen
    assert [d.isoformat() for d in a.seen] == [
        "2025-11-19T12:00:00+00:00",
        "2025-11-20T12:00:00+00:00",
        "2025-11-21T12:00:00+00:00",
    ]


async def test_unexpected_provider_crash_becomes_failed_result(store):
    rec = _RecordingProvider()
    results = await collect_forecasts(
        BASE, store=store, providers=[_CrashingProvider(RuntimeError("bug")), rec]
    )

    assert [r.status for r in results] == ["failed", "empty"]
    assert "RuntimeError" in results[0].error
    assert rec.seen is not None


async def test_storage_failure_propagates_after_all_settle(store):
    rec = _RecordingProvider()
    boom = OperationalError("INSERT INTO forecasts", {}, Exception("database is locked"))

    with pytest.raises(OperationalError):
        await collect_forecasts(BASE, store=store, providers=[_CrashingProvider(boom), rec])

    assert rec.seen is not None

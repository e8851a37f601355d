from datetime import datetime, timezone

import httpx
import pytest

from weatherscore.services.resolver import (
    ResolutionExists,
    add_manual_resolution,
    fetch_actual_high,
    resolve_weather,
)

from _helpers import failing_client, mock_client

TARGET = datetime(2025, 11, 19, 12, tzinfo=timezone.utc)


def _archive(values):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={"daily": {"time": ["2025-11-19"] if values else [], "temperature_2m_max": values}},
        )

    return handler


@pytest.mark.anyio
async def test_fetch_actual_high_requests_single_day():
    calls = []
    async with mock_client(_archive([55.3]), calls) as client:
        assert await fetch_actual_high(TARGET, client=client) == 55.3

    [req] = calls
    assert req.url.path == "/v1/archive"
    assert req.url.params["start_date"] == "2025-11-19"
    assert req.url.params["end_date"] == "2025-11-19"
    assert req.url.params["daily"] == "temperature_2m_max"


@pytest.mark.anyio
async def test_resolve_twice_creates_one_row(store):
    async with mock_client(_archive([55.3])) as client:
        first = await resolve_weather(TARGET, store=store, client=client)
        second = await resolve_weather(TARGET, store=store, client=client)

    assert first is not None
    assert first.target_date.hour == 0
    assert second is None
    rows = store.list_resolutions()
    assert len(rows) == 1
    assert rows[0].actual_high == 55.3


@pytest.mark.anyio
@pytest.mark.parametrize("values", [[], [None]])
async def test_no_archive_data_writes_nothing(store, values):
    async with mock_client(_archive(values)) as client:
        assert await resolve_weather(TARGET, store=store, client=client) is None
    assert store.list_resolutions() == []


@pytest.mark.anyio
async def test_upstream_failure_is_treated_as_no_data(store):
    async with failing_client() as client:
        assert await resolve_weather(TARGET, store=store, client=client) is None
    async with mock_client(lambda r: httpx.Response(502)) as client:
        assert await resolve_weather(TARGET, store=store, client=client) is None
    assert store.list_resolutions() == []


def test_manual_resolution_conflict(store):
    row = add_manual_resolution(store, TARGET, 61.0)
    assert row.actual_high == 61.0

    with pytest.raises(ResolutionExists):
        add_manual_resolution(store, datetime(2025, 11, 19, 3, tzinfo=timezone.utc), 62.0)
    assert len(store.list_resolutions()) == 1

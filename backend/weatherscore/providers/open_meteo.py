# weatherscore/providers/open_meteo.py
from __future__ import annotations

from datetime import datetime
from typing import List, Sequence

import httpx

from weatherscore.utils.dates import iso_day

from .base import ForecastProvider, Sample


class OpenMeteoProvider(ForecastProvider):
    """
    Open-Meteo "best match" model blend (ECMWF-led over North America).

    One request spans the whole window; the response is a pair of parallel arrays
    ``hourly.time`` ("2025-11-19T00:00", local to REFERENCE_TZ) and
    ``hourly.temperature_2m`` which may contain nulls.
    """

    name = "ECMWF"

    async def fetch_samples(
        self, client: httpx.AsyncClient, target_dates: Sequence[datetime]
    ) -> List[Sample]:
        ordered = sorted(target_dates)
        if not ordered:
            return []
        resp = await client.get(
            f"{self.settings.OPEN_METEO_BASE_URL.rstrip('/')}/v1/forecast",
            params={
                "latitude": self.settings.LATITUDE,
                "longitude": self.settings.LONGITUDE,
                "hourly": "temperature_2m",
                "temperature_unit": "fahrenheit",
                "timezone": self.settings.REFERENCE_TZ,
                "start_date": iso_day(ordered[0]),
                "end_date": iso_day(ordered[-1]),
            },
        )
        resp.raise_for_status()
        hourly = resp.json()["hourly"]
        times = hourly["time"]
        temps = hourly["temperature_2m"]
        if len(times) != len(temps):
            raise ValueError(f"hourly arrays differ in length: {len(times)} != {len(temps)}")

        return [(t, v, {"time": t, "temperature_2m": v}) for t, v in zip(times, temps)]

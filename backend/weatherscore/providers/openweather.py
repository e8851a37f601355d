# weatherscore/providers/openweather.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

import httpx

from .base import ForecastProvider, Sample


class OpenWeatherProvider(ForecastProvider):
    """OpenWeatherMap 5 day / 3 hour forecast. Needs OPENWEATHER_API_KEY."""

    name = "OWM"
    requires_api_key = True

    @property
    def api_key(self) -> Optional[str]:
        return self.settings.OPENWEATHER_API_KEY

    async def fetch_samples(
        self, client: httpx.AsyncClient, target_dates: Sequence[datetime]
    ) -> List[Sample]:
        resp = await client.get(
            f"{self.settings.OPENWEATHER_BASE_URL.rstrip('/')}/data/2.5/forecast",
            params={
                "lat": self.settings.LATITUDE,
                "lon": self.settings.LONGITUDE,
                "appid": self.api_key,
                "units": "imperial",
            },
        )
        resp.raise_for_status()
        # dt_txt looks like "2025-11-19 12:00:00"
        return [(item["dt_txt"], item["main"]["temp_max"], item) for item in resp.json()["list"]]

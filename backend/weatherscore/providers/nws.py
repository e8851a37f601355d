# weatherscore/providers/nws.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Sequence

import httpx

from .base import ForecastProvider, Sample


class NWSProvider(ForecastProvider):
    """
    National Weather Service: resolve the point to its forecast grid, then read the
    hourly periods. ``startTime`` carries the local offset, e.g. 2025-11-19T06:00:00-05:00.
    """

    name = "NWS"

    def _headers(self) -> Dict[str, str]:
        # api.weather.gov rejects requests without an identifying User-Agent.
        return {"User-Agent": self.settings.NWS_USER_AGENT, "Accept": "application/geo+json"}

    async def fetch_samples(
        self, client: httpx.AsyncClient, target_dates: Sequence[datetime]
    ) -> List[Sample]:
        base = self.settings.NWS_BASE_URL.rstrip("/")
        lat, lon = self.settings.LATITUDE, self.settings.LONGITUDE

        p = await client.get(f"{base}/points/{lat:.4f},{lon:.4f}", headers=self._headers())
        p.raise_for_status()
        props = p.json()["properties"]
        grid_id, grid_x, grid_y = props["gridId"], props["gridX"], props["gridY"]

        h = await client.get(
            f"{base}/gridpoints/{grid_id}/{grid_x},{grid_y}/forecast/hourly",
            headers=self._headers(),
        )
        h.raise_for_status()
        periods = h.json()["properties"]["periods"]

        return [(per["startTime"], per.get("temperature"), per) for per in periods]

# backend/weatherscore/config.py
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # environment: "dev" for running the app locally, "test" for pytest
    ENV: str = "dev"

    DATABASE_URL: str | None = None
    TEST_DATABASE_URL: str | None = None

    # --- Forecast point (KLGA) ---
    LATITUDE: float = 40.7769
    LONGITUDE: float = -73.8740
    # IANA zone the upstreams are asked to report local days in.
    REFERENCE_TZ: str = "America/New_York"

    # --- Upstream providers ---
    NWS_BASE_URL: str = "https://api.weather.gov"
    NWS_USER_AGENT: str = "weatherscore/1.0 (contact@example.com)"
    OPEN_METEO_BASE_URL: str = "https://api.open-meteo.com"
    OPEN_METEO_ARCHIVE_URL: str = "https://archive-api.open-meteo.com"
    OPENWEATHER_BASE_URL: str = "https://api.openweathermap.org"
    OPENWEATHER_API_KEY: str | None = None
    HTTP_TIMEOUT_S: float = Field(30.0, gt=0, description="Per-request upstream timeout.")

    # --- Collection / scoring ---
    FORECAST_DAYS: int = 3
    ACCURACY_MARGIN: float = 2.0  # degrees F

    # --- Scheduler ---
    SCHEDULER_ENABLED: bool = True
    # IANA timezone name used by APScheduler (e.g., "UTC", "America/New_York").
    SCHEDULER_TZ: str = "UTC"
    # Optional dedicated job store URL. If None, jobs live in memory.
    SCHEDULER_DB_URL: str | None = None

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]

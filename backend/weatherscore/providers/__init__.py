from .base import ForecastProvider, ProviderResult, daily_highs
from .nws import NWSProvider
from .open_meteo import OpenMeteoProvider
from .openweather import OpenWeatherProvider


def default_providers(settings=None) -> list[ForecastProvider]:
    return [NWSProvider(settings), OpenMeteoProvider(settings), OpenWeatherProvider(settings)]


__all__ = [
    "ForecastProvider",
    "ProviderResult",
    "daily_highs",
    "NWSProvider",
    "OpenMeteoProvider",
    "OpenWeatherProvider",
    "default_providers",
]

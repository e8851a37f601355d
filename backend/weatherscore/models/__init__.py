from .forecast import Forecast
from .resolution import Resolution


__all__ = ["Forecast", "Resolution"]

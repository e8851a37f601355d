from datetime import datetime, timezone

import httpx

from weatherscore.config import Settings

BASE = datetime(2025, 11, 19, 15, 30, tzinfo=timezone.utc)


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    values = {"OPENWEATHER_API_KEY": None, "HTTP_TIMEOUT_S": 5.0}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def mock_client(handler, calls=None) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by ``handler(request)``; records them in ``calls``."""

    def _recording(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(_recording))


def failing_client(calls=None) -> httpx.AsyncClient:
    def _boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("upstream unreachable", request=request)

    return mock_client(_boom, calls)

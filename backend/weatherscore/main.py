# weatherscore/main.py
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weatherscore.routers.health import router as health_router
from weatherscore.routers.weather import router as weather_router
from weatherscore.db.session import init_db
from weatherscore.observability.logging import configure_logging
from weatherscore.observability.middleware import register_request_middleware, unhandled_exception_handler
from weatherscore.observability.metrics import router as observability_router
from weatherscore.scheduler.setup import init_scheduler, shutdown_scheduler

configure_logging()

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]


def create_app() -> FastAPI:
    app = FastAPI(title="Weather Forecast Accuracy", version="0.3.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=DEV_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400
    )

    register_request_middleware(app)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.on_event("startup")
    async def _startup() -> None:
        init_db()
        await init_scheduler()

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await shutdown_scheduler()

    app.include_router(health_router)
    app.include_router(observability_router)
    app.include_router(weather_router)

    return app


app = create_app()

from datetime import datetime, timedelta, timezone

import structlog

from weatherscore.services.collector import collect_forecasts
from weatherscore.services.resolver import resolve_weather

logger = structlog.get_logger(__name__)


async def collect_forecasts_job() -> None:
    """Every-4-hours forecast collection for the rolling window starting today."""
    started = datetime.now(timezone.utc)
    logger.info("collect_job.start", started=started.isoformat())
    results = await collect_forecasts(started)
    logger.info(
        "collect_job.done",
        written=sum(len(r.written) for r in results),
        failed=[r.source for r in results if r.failed],
    )


async def resolve_yesterday_job() -> None:
    """Daily resolution of the previous UTC day."""
    yesterday = datetime.now(timezone.utc) - timedelta(days=1)
    logger.info("resolve_job.start", target_date=yesterday.date().isoformat())
    row = await resolve_weather(yesterday)
    logger.info("resolve_job.done", created=row is not None)

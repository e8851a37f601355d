from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from pytz import timezone

from weatherscore.scheduler.jobs import collect_forecasts_job, resolve_yesterday_job
from weatherscore.config import get_settings


settings = get_settings()


def _jobstore():
    if settings.SCHEDULER_DB_URL:
        return SQLAlchemyJobStore(url=settings.SCHEDULER_DB_URL)
    return MemoryJobStore()


# Global scheduler instance shared by the FastAPI startup/shutdown hooks.
scheduler = AsyncIOScheduler(
    jobstores={"default": _jobstore()},
    timezone=timezone(settings.SCHEDULER_TZ),
)


def configure_jobs() -> None:
    """
    Register all recurring jobs with the scheduler.

    - collect-forecasts: every 4 hours on the hour
    - resolve-yesterday: daily at 06:30
    """
    scheduler.add_job(
        collect_forecasts_job,
        "cron",
        id="collect-forecasts",
        hour="*/4",
        minute=0,
        replace_existing=True,
        misfire_grace_time=1800,
        coalesce=True,
        max_instances=1,
    )
    scheduler.add_job(
        resolve_yesterday_job,
        "cron",
        id="resolve-yesterday",
        hour=6,
        minute=30,
        replace_existing=True,
        misfire_grace_time=7200,
        coalesce=True,
        max_instances=1,
    )


async def init_scheduler() -> None:
    """
    FastAPI startup hook: initialize and start the APScheduler instance
    if SCHEDULER_ENABLED is true.
    """
    if not settings.SCHEDULER_ENABLED:
        return
    configure_jobs()
    scheduler.start()


async def shutdown_scheduler() -> None:
    """
    FastAPI shutdown hook: stop the scheduler cleanly.
    """
    if scheduler.running:
        scheduler.shutdown(wait=False)

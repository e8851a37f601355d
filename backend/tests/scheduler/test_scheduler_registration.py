# backend/tests/scheduler/test_scheduler_registration.py

from weatherscore.scheduler.setup import scheduler, configure_jobs


def test_configure_jobs_registers_expected_jobs() -> None:
    """
    configure_jobs() registers the forecast collection and resolution jobs
    on the global scheduler.
    """
    # Start from a clean slate so repeated test runs don't accumulate jobs
    scheduler.remove_all_jobs()

    configure_jobs()

    job_ids = {job.id for job in scheduler.get_jobs()}

    assert {"collect-forecasts", "resolve-yesterday"} <= job_ids

"""
APScheduler Background Jobs

Housekeeping for stored availability matches.
Jobs run via BackgroundScheduler in FastAPI process.
"""

import structlog
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.config import settings

logger = structlog.get_logger(__name__)


def run_stale_match_cleanup():
    """
    Wrapper function for the stale match purge job.

    Deletes stored matches whose date lies more than MATCH_RETENTION_DAYS
    in the past. Errors are logged and never stop the scheduler.
    """
    try:
        from app import database
        from app.services.match_persistence import MatchPersistenceGateway

        if database.SessionLocal is None:
            logger.warning("stale_match_cleanup_skipped", reason="database_not_configured")
            return

        db = database.SessionLocal()
        try:
            deleted = MatchPersistenceGateway(db).purge_stale(settings.match_retention_days)
            db.commit()
            logger.info("stale_match_cleanup_completed", deleted=deleted)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    except Exception as e:
        logger.error("stale_match_cleanup_crashed", error=str(e), exc_info=True)


def start_scheduler(environment: str = "production") -> BackgroundScheduler:
    """
    Start background scheduler with all jobs.

    Args:
        environment: Current environment (skip scheduler in testing)

    Returns:
        BackgroundScheduler instance
    """
    scheduler = BackgroundScheduler(timezone="Europe/Paris")

    if environment == "testing":
        logger.info("scheduler_skipped", reason="testing_environment")
        return scheduler

    scheduler.add_job(
        run_stale_match_cleanup,
        trigger=IntervalTrigger(hours=settings.stale_match_cleanup_interval_hours),
        id="stale_match_cleanup",
        name="Stale Availability Match Cleanup",
        replace_existing=True
    )
    logger.info("job_registered", job="stale_match_cleanup",
                schedule=f"every_{settings.stale_match_cleanup_interval_hours}h")

    scheduler.start()
    logger.info("scheduler_started", jobs=["stale_match_cleanup"])

    return scheduler


def stop_scheduler(scheduler: BackgroundScheduler):
    """
    Stop background scheduler gracefully.

    Args:
        scheduler: BackgroundScheduler instance to stop
    """
    if scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("scheduler_stopped")


__all__ = [
    "start_scheduler",
    "stop_scheduler",
    "run_stale_match_cleanup",
]

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED
import logging

logger = logging.getLogger(__name__)

# Global scheduler instance
scheduler = BackgroundScheduler(
    timezone="UTC",
    job_defaults={
        'coalesce': True,
        'max_instances': 1,
        'misfire_grace_time': 3600
    }
)


def job_listener(event):
    if event.exception:
        logger.error(f"Job {event.job_id} failed with exception: {event.exception}")
    else:
        logger.info(f"Job {event.job_id} executed successfully")


def run_media_cleanup_job():
    from app.tasks.media_cleanup import run_media_cleanup

    logger.info("Starting scheduled media cleanup...")
    result = run_media_cleanup()
    logger.info(f"Scheduled media cleanup finished: {result}")


def init_scheduler():
    scheduler.add_listener(job_listener, EVENT_JOB_ERROR | EVENT_JOB_EXECUTED)

    scheduler.add_job(
        run_media_cleanup_job,
        trigger=CronTrigger(
            hour=4,
            minute=0
        ),
        id='daily_media_cleanup',
        name='Daily Orphaned Media Cleanup',
        replace_existing=True
    )

    logger.info("Scheduler initialized")
    logger.info("  - Orphaned media cleanup: Daily at 04:00 UTC")


def start_scheduler():
    if not scheduler.running:
        scheduler.start()
        logger.info("Background scheduler started")


def shutdown_scheduler():
    if scheduler.running:
        scheduler.shutdown(wait=True)
        logger.info("Background scheduler stopped")


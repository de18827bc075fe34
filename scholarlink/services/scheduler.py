"""
APScheduler Configuration

Manages the periodic session reminder job.
"""
import logging
import time
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from scholarlink import config
from scholarlink.services.session_lifecycle import SessionLifecycleCoordinator

logger = logging.getLogger(__name__)


async def send_session_reminders(
    coordinator: SessionLifecycleCoordinator,
    window_hours: Optional[int] = None,
) -> Optional[dict]:
    """
    Hourly job that reminds students and tutors of accepted sessions.

    Logs execution summary including reminders sent and duration. Errors are
    logged and the job waits for its next run.
    """
    window_hours = window_hours or config.REMINDER_WINDOW_HOURS
    logger.info(f"Starting session reminder run ({window_hours}h window)")
    start_time = time.time()

    try:
        summary = await coordinator.send_reminders(window_hours)
    except Exception as e:
        logger.error(f"Failed to send session reminders: {e}", exc_info=True)
        return None

    duration_ms = (time.time() - start_time) * 1000
    logger.info(
        f"Session reminders: {summary['reminders_sent']} sent for "
        f"{summary['sessions_checked']} upcoming sessions in {duration_ms:.2f}ms"
    )
    return summary


def configure_scheduler(coordinator: SessionLifecycleCoordinator) -> AsyncIOScheduler:
    """
    Build an AsyncIOScheduler with all scheduled jobs.

    Jobs:
        - Session reminders: Every hour at :05
    """
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        send_session_reminders,
        trigger=CronTrigger(hour='*', minute=5),
        args=[coordinator],
        id='session_reminders',
        name='Send Upcoming Session Reminders',
        replace_existing=True,
        coalesce=True,  # Combine missed runs into single execution
        max_instances=1  # Only one instance at a time
    )
    logger.info("Scheduler configured with session reminder job")
    return scheduler


def start_scheduler(coordinator: SessionLifecycleCoordinator) -> AsyncIOScheduler:
    """Start the APScheduler"""
    scheduler = configure_scheduler(coordinator)
    scheduler.start()
    logger.info("Scheduler started")
    return scheduler


def stop_scheduler(scheduler: AsyncIOScheduler):
    """Stop the APScheduler"""
    scheduler.shutdown()
    logger.info("Scheduler stopped")

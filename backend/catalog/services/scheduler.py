"""APScheduler setup for background jobs."""
from __future__ import annotations
import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from catalog.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

_scheduler: AsyncIOScheduler | None = None


def get_scheduler() -> AsyncIOScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = AsyncIOScheduler()
    return _scheduler


async def prune_sessions():
    """Delete login sessions whose expiry has passed."""
    from catalog.database import get_sessionmaker
    from catalog.services.sessions import prune_expired_sessions

    try:
        async with get_sessionmaker()() as db:
            await prune_expired_sessions(db)
    except Exception as e:
        logger.error(f"Session pruning failed: {e}", exc_info=True)


def start_scheduler():
    scheduler = get_scheduler()
    scheduler.add_job(
        prune_sessions,
        trigger=IntervalTrigger(minutes=settings.session_prune_interval_minutes),
        id="prune_sessions",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler started")


def stop_scheduler():
    scheduler = get_scheduler()
    if scheduler.running:
        scheduler.shutdown(wait=False)

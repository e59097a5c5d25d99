"""
Task scheduler.

APScheduler-based periodic task scheduling for background jobs.
"""

import sys
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from commission_engine.config.logging import configure_logging  # noqa: E402
from commission_engine.config.settings import (  # noqa: E402
    Settings,
    get_settings,
)
from jobs.tasks.event_dispatch import dispatch_domain_events  # noqa: E402


def create_scheduler(settings: Settings | None = None) -> AsyncIOScheduler:
    """
    Create and configure task scheduler.

    Args:
        settings: Application settings

    Returns:
        Configured AsyncIOScheduler instance
    """
    settings = settings or get_settings()
    scheduler = AsyncIOScheduler()

    # Domain event outbox dispatch
    scheduler.add_job(
        dispatch_domain_events.send,
        trigger=IntervalTrigger(
            seconds=settings.event_dispatch_interval_seconds
        ),
        id="domain_event_dispatch",
        name="Domain Event Dispatch",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )

    logger.info("Task scheduler configured with 1 job")

    return scheduler


async def start_scheduler() -> None:
    """Start the task scheduler."""
    scheduler = create_scheduler()
    scheduler.start()
    logger.info("Task scheduler started")


if __name__ == "__main__":
    import asyncio

    # Broker must be configured before actors are sent
    import jobs.broker  # noqa: F401

    configure_logging(get_settings())

    async def main():
        await start_scheduler()
        # Keep running
        try:
            await asyncio.Event().wait()
        except KeyboardInterrupt:
            logger.info("Scheduler stopped")

    asyncio.run(main())

"""
Domain event dispatch task.

Publishes pending outbox rows to Redis. Scheduled every few seconds by
the scheduler.
"""

import asyncio

import dramatiq
import redis.asyncio as redis
from loguru import logger

from commission_engine.config.database import (
    create_engine_from_settings,
    create_session_maker,
)
from commission_engine.config.settings import get_settings
from commission_engine.services.event_dispatch_service import (
    EventDispatchService,
)


@dramatiq.actor(max_retries=0, time_limit=60_000)  # 1 min timeout
def dispatch_domain_events() -> None:
    """Dispatch pending domain events."""
    logger.debug("Starting domain event dispatch...")

    try:
        stats = asyncio.run(_dispatch_domain_events_async())
        if stats["dispatched"] or stats["failed"]:
            logger.info(f"Domain event dispatch complete: {stats}")
    except Exception as e:
        logger.exception(f"Domain event dispatch failed: {e}")


async def _dispatch_domain_events_async() -> dict[str, int]:
    """Async implementation of domain event dispatch."""
    settings = get_settings()

    local_engine = create_engine_from_settings(settings, null_pool=True)
    local_session_maker = create_session_maker(local_engine)
    redis_client = redis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password,
        db=settings.redis_db,
        decode_responses=True,
    )

    try:
        async with local_session_maker() as session:
            service = EventDispatchService(
                session,
                redis_client,
                channel_prefix=settings.event_channel_prefix,
                batch_size=settings.event_dispatch_batch_size,
                max_attempts=settings.event_dispatch_max_attempts,
            )
            return await service.dispatch_pending()
    finally:
        await redis_client.aclose()
        await local_engine.dispose()

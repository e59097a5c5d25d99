"""
Event dispatch service.

Drains the domain event outbox to Redis pub/sub channels named
``{prefix}.{event_type}``. Failed publishes stay pending and are retried
on the next run until the attempt limit is reached.
"""

import json
from typing import Any

import redis.asyncio as redis
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.domain_event import DomainEvent
from commission_engine.repositories.domain_event_repository import (
    DomainEventRepository,
)


class EventDispatchService:
    """Outbox to Redis dispatcher."""

    def __init__(
        self,
        session: AsyncSession,
        redis_client: redis.Redis,
        channel_prefix: str = "commission_engine.events",
        batch_size: int = 100,
        max_attempts: int = 10,
    ) -> None:
        """
        Initialize event dispatch service.

        Args:
            session: Database session
            redis_client: Redis client used for PUBLISH
            channel_prefix: Channel name prefix
            batch_size: Events drained per run
            max_attempts: Failed attempts before an event is parked
        """
        self.session = session
        self.redis_client = redis_client
        self.channel_prefix = channel_prefix
        self.batch_size = batch_size
        self.max_attempts = max_attempts
        self.event_repo = DomainEventRepository(session)

    def channel_for(self, event_type: str) -> str:
        """Redis channel for event type."""
        return f"{self.channel_prefix}.{event_type}"

    @staticmethod
    def serialize(event: DomainEvent) -> str:
        """Render event message."""
        message: dict[str, Any] = {
            "id": event.id,
            "type": event.event_type,
            "payload": event.payload,
            "createdAt": event.created_at.isoformat(),
        }
        return json.dumps(message, default=str)

    async def dispatch_pending(self) -> dict[str, int]:
        """
        Publish pending events, oldest first.

        Returns:
            Dict with dispatched and failed counts
        """
        events = await self.event_repo.get_pending(
            limit=self.batch_size, max_attempts=self.max_attempts
        )
        if not events:
            logger.debug("No pending domain events")
            return {"dispatched": 0, "failed": 0}

        dispatched = 0
        failed = 0

        for event in events:
            try:
                await self.redis_client.publish(
                    self.channel_for(event.event_type),
                    self.serialize(event),
                )
            except Exception as e:
                await self.event_repo.record_failure(event, str(e))
                failed += 1
                logger.error(
                    f"Failed to publish domain event {event.id}: {e}",
                    extra={
                        "event_id": event.id,
                        "event_type": event.event_type,
                        "attempts": event.attempts,
                    },
                )
                if event.attempts >= self.max_attempts:
                    logger.critical(
                        f"Domain event {event.id} parked after "
                        f"{event.attempts} attempts",
                        extra={"event_id": event.id},
                    )
                continue

            await self.event_repo.mark_dispatched(event)
            dispatched += 1

        await self.session.commit()

        logger.info(
            f"Domain events dispatched: {dispatched} sent, {failed} failed",
            extra={"dispatched": dispatched, "failed": failed},
        )
        return {"dispatched": dispatched, "failed": failed}

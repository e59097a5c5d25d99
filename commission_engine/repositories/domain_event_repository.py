"""
DomainEvent repository.

Outbox queries for the dispatch job.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.domain_event import DomainEvent
from commission_engine.repositories.base import BaseRepository
from commission_engine.utils.time import utcnow


class DomainEventRepository(BaseRepository[DomainEvent]):
    """DomainEvent repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize domain event repository."""
        super().__init__(DomainEvent, session)

    async def get_pending(
        self, limit: int, max_attempts: int
    ) -> list[DomainEvent]:
        """
        Get undispatched events, oldest first.

        Args:
            limit: Max number of events
            max_attempts: Skip events that failed this many times

        Returns:
            List of pending events
        """
        stmt = (
            select(DomainEvent)
            .where(
                DomainEvent.dispatched_at.is_(None),
                DomainEvent.attempts < max_attempts,
            )
            .order_by(DomainEvent.created_at, DomainEvent.id)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def mark_dispatched(self, event: DomainEvent) -> None:
        """Mark event as published."""
        event.dispatched_at = utcnow()
        event.last_error = None
        await self.session.flush()

    async def record_failure(self, event: DomainEvent, error: str) -> None:
        """
        Record failed publish attempt.

        Args:
            event: Event that failed
            error: Error description
        """
        event.attempts += 1
        event.last_error = error[:1000]
        await self.session.flush()

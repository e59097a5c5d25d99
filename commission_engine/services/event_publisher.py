"""
Event publisher.

Queues domain events in the transactional outbox. The row is written in
a savepoint of the caller's session, so it commits together with the
state change it describes; the dispatch job publishes it later.
"""

from dataclasses import dataclass
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.domain_event import DomainEvent
from commission_engine.repositories.domain_event_repository import (
    DomainEventRepository,
)


@dataclass(frozen=True)
class QueuedEvent:
    """Event queued through a publisher."""

    event_id: int
    event_type: str
    payload: dict[str, Any]


class EventPublisher:
    """Outbox writer."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize event publisher."""
        self.session = session
        self.event_repo = DomainEventRepository(session)
        self.queued: list[QueuedEvent] = []

    async def publish(
        self, event_type: str, payload: dict[str, Any]
    ) -> DomainEvent | None:
        """
        Queue domain event.

        Failures are logged and swallowed; financial state is never
        rolled back because an event could not be queued.

        Args:
            event_type: Event type
            payload: JSON-serializable payload

        Returns:
            Outbox row, or None if queueing failed
        """
        try:
            async with self.session.begin_nested():
                event = await self.event_repo.create(
                    event_type=str(event_type),
                    payload=payload,
                )
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to queue domain event: {e}",
                extra={"event_type": str(event_type)},
            )
            return None

        self.queued.append(
            QueuedEvent(
                event_id=event.id,
                event_type=event.event_type,
                payload=payload,
            )
        )
        logger.debug(
            "Domain event queued",
            extra={"event_id": event.id, "event_type": event.event_type},
        )
        return event

    def queued_types(self) -> list[str]:
        """Types of events queued so far, in order."""
        return [event.event_type for event in self.queued]

"""
DomainEvent model.

Transactional outbox. Rows are written in the same transaction as the
state change they describe and drained to Redis by the dispatch job.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base


class DomainEvent(Base):
    """
    DomainEvent entity.

    Attributes:
        id: Primary key
        event_type: Event type (commission.calculated, ...)
        payload: Event payload (JSON)
        attempts: Failed publish attempts
        last_error: Last publish error
        created_at: Queue timestamp
        dispatched_at: Publish timestamp (None while pending)
    """

    __tablename__ = "domain_events"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Event
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    # Delivery tracking
    attempts: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    dispatched_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_dispatched(self) -> bool:
        """Check if event was published."""
        return self.dispatched_at is not None

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<DomainEvent(id={self.id}, type={self.event_type!r}, "
            f"attempts={self.attempts}, "
            f"dispatched={self.is_dispatched})>"
        )


# Indexes
Index(
    "idx_domain_event_pending",
    DomainEvent.dispatched_at,
    DomainEvent.created_at,
)

"""
AffiliateActivity model.

One row per transaction whose activity was recorded against an
affiliate. The unique transaction id keeps redelivered events from
adding the same volume twice.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    DECIMAL,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base


class AffiliateActivity(Base):
    """
    AffiliateActivity entity.

    Attributes:
        id: Primary key
        affiliate_id: Referring affiliate
        transaction_id: Transaction that produced the activity
        transaction_type: deposit / bet / ggr
        volume: Volume added to the monthly total (0 for non-deposits)
        recorded_at: Recording timestamp
    """

    __tablename__ = "affiliate_activities"
    __table_args__ = (
        UniqueConstraint(
            "transaction_id", name="uq_affiliate_activity_transaction"
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Activity
    affiliate_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("affiliates.id"), nullable=False, index=True
    )
    transaction_id: Mapped[str] = mapped_column(String(64), nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(16), nullable=False)
    volume: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False, default=Decimal("0")
    )

    # Timestamps
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<AffiliateActivity(id={self.id}, "
            f"affiliate_id={self.affiliate_id!r}, "
            f"transaction_id={self.transaction_id!r})>"
        )

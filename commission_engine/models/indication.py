"""
Indication model.

A referral of a customer by an affiliate. At most one validated or paid
indication may exist per (source affiliate, customer).
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, DateTime, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.enums import IndicationStatus


class Indication(Base):
    """
    Indication entity.

    Attributes:
        id: Primary key
        source_affiliate_id: Referring affiliate
        customer_id: Referred customer
        status: pending / validated / paid / rejected
        bonus_amount: Flat indication bonus
        validated_at: Validation timestamp
        created_at: Creation timestamp
    """

    __tablename__ = "indications"

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Pair
    source_affiliate_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("affiliates.id"), nullable=False, index=True
    )
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)

    # Bonus
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=IndicationStatus.VALIDATED.value,
    )
    bonus_amount: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False, default=Decimal("0")
    )

    # Timestamps
    validated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Indication(id={self.id}, "
            f"source_affiliate_id={self.source_affiliate_id!r}, "
            f"customer_id={self.customer_id!r}, status={self.status!r})>"
        )


# Bonus-duplication guard
_ACTIVE_STATUS_CLAUSE = text("status IN ('validated', 'paid')")

Index(
    "uq_indication_active_pair",
    Indication.source_affiliate_id,
    Indication.customer_id,
    unique=True,
    postgresql_where=_ACTIVE_STATUS_CLAUSE,
    sqlite_where=_ACTIVE_STATUS_CLAUSE,
)

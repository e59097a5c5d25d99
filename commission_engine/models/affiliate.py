"""
Affiliate model.

Affiliate standing (category/level), referral counters and money
accumulators. Counters and balances are only ever changed with atomic
increments (see AffiliateRepository).
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    DECIMAL,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commission_engine.models.base import Base, TimestampMixin
from commission_engine.models.enums import AffiliateCategory


class Affiliate(TimestampMixin, Base):
    """
    Affiliate entity.

    Attributes:
        id: External affiliate id
        sponsor_id: Parent affiliate in the referral hierarchy
        category: Category tier
        category_level: Level inside the category
        direct_indications: Validated direct referrals
        total_indications: Validated referrals in the whole downline
        total_commissions: Lifetime credited commissions
        available_balance: Withdrawable balance
        current_month_volume: Deposit volume this month
        last_activity_at: Last recorded activity (drives decay)
    """

    __tablename__ = "affiliates"

    # Primary key
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Hierarchy
    sponsor_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("affiliates.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Standing
    category: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=AffiliateCategory.JOGADOR.value,
    )
    category_level: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )

    # Counters
    direct_indications: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    total_indications: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )

    # Money
    total_commissions: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False, default=Decimal("0")
    )
    available_balance: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False, default=Decimal("0")
    )
    current_month_volume: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False, default=Decimal("0")
    )

    # Activity
    last_activity_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    sponsor: Mapped[Optional["Affiliate"]] = relationship(
        "Affiliate", remote_side=[id], lazy="select"
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Affiliate(id={self.id!r}, "
            f"category={self.category!r}, "
            f"level={self.category_level}, "
            f"balance={self.available_balance})>"
        )


# Indexes
Index(
    "idx_affiliate_category_level",
    Affiliate.category,
    Affiliate.category_level,
)

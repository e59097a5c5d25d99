"""
Commission model.

One record per (transaction, beneficiary, hierarchy level, validation
model). The unique constraint is the authoritative idempotency guard.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    DECIMAL,
    JSON,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commission_engine.models.base import Base, TimestampMixin
from commission_engine.models.enums import CommissionStatus, CommissionType

if TYPE_CHECKING:
    from commission_engine.models.affiliate import Affiliate


class Commission(TimestampMixin, Base):
    """
    Commission entity.

    Attributes:
        id: Primary key
        affiliate_id: Beneficiary
        source_affiliate_id: Affiliate whose customer triggered the payout
        customer_id: Customer
        transaction_id: Triggering transaction
        type: Commission type (cpa)
        level: Distance from the source affiliate (1..5)
        validation_model: Validation model the payout was granted under
        base_amount: Base amount for this level
        percentage: Rate applied to the base amount
        commission_amount: Amount before decay
        final_amount: Amount after decay (credited)
        status: calculated / approved / paid / cancelled
        extra_data: Validation model, transaction type, decay applied
    """

    __tablename__ = "commissions"
    __table_args__ = (
        UniqueConstraint(
            "transaction_id",
            "affiliate_id",
            "level",
            "validation_model",
            name="uq_commission_idempotency",
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Parties
    affiliate_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("affiliates.id"), nullable=False, index=True
    )
    source_affiliate_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    transaction_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )

    # Commission data
    type: Mapped[str] = mapped_column(
        String(16), nullable=False, default=CommissionType.CPA.value
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    validation_model: Mapped[str] = mapped_column(
        String(8), nullable=False
    )
    base_amount: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )
    percentage: Mapped[Decimal] = mapped_column(
        DECIMAL(10, 4), nullable=False
    )
    commission_amount: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )
    final_amount: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=CommissionStatus.CALCULATED.value,
        index=True,
    )

    # "metadata" is reserved on declarative classes
    extra_data: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    # Relationships
    affiliate: Mapped["Affiliate"] = relationship(
        "Affiliate", lazy="select"
    )

    def to_dict(self) -> dict[str, Any]:
        """Render commission for results and event payloads."""
        return {
            "id": self.id,
            "affiliateId": self.affiliate_id,
            "sourceAffiliateId": self.source_affiliate_id,
            "customerId": self.customer_id,
            "transactionId": self.transaction_id,
            "type": self.type,
            "level": self.level,
            "baseAmount": str(self.base_amount),
            "percentage": str(self.percentage),
            "commissionAmount": str(self.commission_amount),
            "finalAmount": str(self.final_amount),
            "status": self.status,
            "metadata": self.extra_data or {},
        }

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Commission(id={self.id}, "
            f"affiliate_id={self.affiliate_id!r}, "
            f"transaction_id={self.transaction_id!r}, "
            f"level={self.level}, final_amount={self.final_amount}, "
            f"status={self.status!r})>"
        )


# Indexes
Index(
    "idx_commission_affiliate_status",
    Commission.affiliate_id,
    Commission.status,
)

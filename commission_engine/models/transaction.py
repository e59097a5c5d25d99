"""
Transaction model.

Customer transactions reported by the monitoring service. Read-only
input for the commission engine.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import DECIMAL, DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from commission_engine.models.base import Base
from commission_engine.models.enums import TransactionStatus


class Transaction(Base):
    """
    Transaction entity.

    Attributes:
        id: External transaction id
        customer_id: Customer who made the transaction
        affiliate_id: Referring affiliate (nullable for organic customers)
        type: deposit / bet / ggr
        amount: Transaction amount
        status: pending / completed / failed / cancelled
        created_at: Transaction timestamp
    """

    __tablename__ = "transactions"

    # Primary key
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Parties
    customer_id: Mapped[str] = mapped_column(
        String(64), nullable=False, index=True
    )
    affiliate_id: Mapped[str | None] = mapped_column(
        String(64), nullable=True, index=True
    )

    # Transaction data
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        DECIMAL(18, 8), nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=TransactionStatus.COMPLETED.value,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(id={self.id!r}, "
            f"customer_id={self.customer_id!r}, "
            f"type={self.type!r}, amount={self.amount}, "
            f"status={self.status!r})>"
        )


# Indexes
Index(
    "idx_transaction_customer_status_created",
    Transaction.customer_id,
    Transaction.status,
    Transaction.created_at,
)

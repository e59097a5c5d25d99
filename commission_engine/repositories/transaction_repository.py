"""
Transaction repository.

Read-only queries over customer transactions.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.enums import TransactionStatus, TransactionType
from commission_engine.models.transaction import Transaction
from commission_engine.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Transaction repository with activity aggregates."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def count_completed_deposits(self, customer_id: str) -> int:
        """
        Count customer's completed deposits.

        Args:
            customer_id: Customer ID

        Returns:
            Number of completed deposits
        """
        return await self.count(
            customer_id=customer_id,
            type=TransactionType.DEPOSIT.value,
            status=TransactionStatus.COMPLETED.value,
        )

    async def get_completed_activity(
        self, customer_id: str, since: datetime
    ) -> tuple[int, Decimal]:
        """
        Aggregate completed transactions since a timestamp.

        Args:
            customer_id: Customer ID
            since: Window start (inclusive)

        Returns:
            Tuple of (count, total amount)
        """
        stmt = select(
            func.count(Transaction.id),
            func.coalesce(func.sum(Transaction.amount), 0),
        ).where(
            Transaction.customer_id == customer_id,
            Transaction.status == TransactionStatus.COMPLETED.value,
            Transaction.created_at >= since,
        )
        result = await self.session.execute(stmt)
        count, total = result.one()
        return int(count or 0), Decimal(str(total or 0))

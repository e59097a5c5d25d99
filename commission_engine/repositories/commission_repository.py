"""
Commission repository.

Data access layer for Commission model.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.commission import Commission
from commission_engine.models.enums import CommissionStatus
from commission_engine.repositories.base import BaseRepository


class CommissionRepository(BaseRepository[Commission]):
    """Commission repository with idempotency lookups."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize commission repository."""
        super().__init__(Commission, session)

    async def exists_for(
        self,
        transaction_id: str,
        affiliate_id: str,
        level: int,
        validation_model: str,
    ) -> bool:
        """
        Check idempotency key.

        Args:
            transaction_id: Triggering transaction
            affiliate_id: Beneficiary
            level: Hierarchy level
            validation_model: Validation model

        Returns:
            True if the commission was already created
        """
        return await self.exists(
            transaction_id=transaction_id,
            affiliate_id=affiliate_id,
            level=level,
            validation_model=validation_model,
        )

    async def get_by_transaction(
        self,
        transaction_id: str,
        validation_model: str | None = None,
    ) -> list[Commission]:
        """
        Get commissions created for a transaction, by level.

        Args:
            transaction_id: Transaction ID
            validation_model: Optional validation model filter

        Returns:
            List of commissions
        """
        stmt = select(Commission).where(
            Commission.transaction_id == transaction_id
        )
        if validation_model is not None:
            stmt = stmt.where(
                Commission.validation_model == validation_model
            )
        stmt = stmt.order_by(Commission.level)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_for_update(self, commission_id: int) -> Commission | None:
        """
        Get commission with a row lock.

        Args:
            commission_id: Commission ID

        Returns:
            Commission or None
        """
        stmt = (
            select(Commission)
            .where(Commission.id == commission_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_total_credited(self, affiliate_id: str) -> Decimal:
        """
        Sum non-cancelled commissions for affiliate.

        Args:
            affiliate_id: Beneficiary

        Returns:
            Total final amount
        """
        stmt = select(
            func.coalesce(func.sum(Commission.final_amount), 0)
        ).where(
            Commission.affiliate_id == affiliate_id,
            Commission.status != CommissionStatus.CANCELLED.value,
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))

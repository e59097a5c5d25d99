"""
Affiliate repository.

Data access layer for Affiliate model. Money and counter columns are
changed with single ``UPDATE ... SET col = col + :x`` statements so
concurrent credits are never lost.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.affiliate import Affiliate
from commission_engine.repositories.base import BaseRepository


class AffiliateRepository(BaseRepository[Affiliate]):
    """Affiliate repository with atomic increments."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize affiliate repository."""
        super().__init__(Affiliate, session)

    async def _increment(self, affiliate_id: str, **deltas: object) -> bool:
        values = {
            name: getattr(Affiliate, name) + delta
            for name, delta in deltas.items()
        }
        stmt = (
            update(Affiliate)
            .where(Affiliate.id == affiliate_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def credit_commission(
        self, affiliate_id: str, amount: Decimal
    ) -> bool:
        """
        Add commission to balance and lifetime total.

        Args:
            affiliate_id: Beneficiary
            amount: Amount to credit (negative to debit)

        Returns:
            True if the affiliate row was updated
        """
        return await self._increment(
            affiliate_id,
            available_balance=amount,
            total_commissions=amount,
        )

    async def credit_indication(
        self, affiliate_id: str, bonus_amount: Decimal
    ) -> bool:
        """
        Count a validated indication and credit its bonus.

        Args:
            affiliate_id: Source affiliate
            bonus_amount: Indication bonus

        Returns:
            True if the affiliate row was updated
        """
        return await self._increment(
            affiliate_id,
            available_balance=bonus_amount,
            direct_indications=1,
            total_indications=1,
        )

    async def record_activity(
        self,
        affiliate_id: str,
        at: datetime,
        volume: Decimal | None = None,
    ) -> bool:
        """
        Set last activity and optionally add monthly volume.

        Args:
            affiliate_id: Affiliate ID
            at: Activity timestamp
            volume: Deposit volume to add

        Returns:
            True if the affiliate row was updated
        """
        values: dict[str, object] = {"last_activity_at": at}
        if volume:
            values["current_month_volume"] = (
                Affiliate.current_month_volume + volume
            )
        stmt = (
            update(Affiliate)
            .where(Affiliate.id == affiliate_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def promote(
        self,
        affiliate_id: str,
        from_category: str,
        from_level: int,
        to_category: str,
        to_level: int,
    ) -> bool:
        """
        Overwrite category and level (progression only).

        The update only applies while the affiliate is still at
        (from_category, from_level), so a concurrent promotion is never
        overwritten with an older step.

        Args:
            affiliate_id: Affiliate ID
            from_category: Expected current category
            from_level: Expected current level
            to_category: New category
            to_level: New level

        Returns:
            True if the affiliate row was updated
        """
        stmt = (
            update(Affiliate)
            .where(
                Affiliate.id == affiliate_id,
                Affiliate.category == from_category,
                Affiliate.category_level == from_level,
            )
            .values(category=to_category, category_level=to_level)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

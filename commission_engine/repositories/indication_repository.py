"""
Indication repository.

Data access layer for Indication model.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.enums import ACTIVE_INDICATION_STATUSES
from commission_engine.models.indication import Indication
from commission_engine.repositories.base import BaseRepository


class IndicationRepository(BaseRepository[Indication]):
    """Indication repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize indication repository."""
        super().__init__(Indication, session)

    async def has_active(
        self, source_affiliate_id: str, customer_id: str
    ) -> bool:
        """
        Check for a validated or paid indication of the pair.

        Args:
            source_affiliate_id: Referring affiliate
            customer_id: Customer

        Returns:
            True if a bonus was already granted for the pair
        """
        stmt = select(func.count(Indication.id)).where(
            Indication.source_affiliate_id == source_affiliate_id,
            Indication.customer_id == customer_id,
            Indication.status.in_(
                [status.value for status in ACTIVE_INDICATION_STATUSES]
            ),
        )
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

"""
Affiliate metrics service.

Records affiliate activity after a transaction has been processed.
Each transaction is recorded at most once, so redelivered events never
add the same volume twice.
"""

from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.enums import TransactionType
from commission_engine.repositories.affiliate_activity_repository import (
    AffiliateActivityRepository,
)
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.utils.exceptions import AffiliateNotFoundError
from commission_engine.utils.money import ZERO, to_decimal
from commission_engine.utils.time import utcnow


class AffiliateMetricsService:
    """Affiliate activity and volume tracking."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize affiliate metrics service."""
        self.session = session
        self.affiliate_repo = AffiliateRepository(session)
        self.activity_repo = AffiliateActivityRepository(session)

    async def record_transaction(
        self,
        affiliate_id: str,
        transaction_id: str,
        transaction_type: str,
        amount: Decimal | str | int | float,
    ) -> bool:
        """
        Record affiliate activity for a transaction.

        Sets last activity to now; deposits also add to the monthly
        volume. The activity row and the increment commit together.

        Args:
            affiliate_id: Referring affiliate
            transaction_id: Transaction ID (recorded once)
            transaction_type: Transaction type
            amount: Transaction amount

        Returns:
            True if recorded, False if the transaction was already recorded

        Raises:
            AffiliateNotFoundError: If the affiliate does not exist
        """
        context = {
            "affiliate_id": affiliate_id,
            "transaction_id": transaction_id,
            "transaction_type": transaction_type,
        }
        if await self.activity_repo.exists(transaction_id=transaction_id):
            logger.debug("Activity already recorded", extra=context)
            return False

        volume = (
            to_decimal(amount)
            if transaction_type == TransactionType.DEPOSIT
            else None
        )
        updated = await self.affiliate_repo.record_activity(
            affiliate_id, at=utcnow(), volume=volume
        )
        if not updated:
            await self.session.rollback()
            raise AffiliateNotFoundError(affiliate_id)

        try:
            async with self.session.begin_nested():
                await self.activity_repo.create(
                    affiliate_id=affiliate_id,
                    transaction_id=transaction_id,
                    transaction_type=transaction_type,
                    volume=volume if volume is not None else ZERO,
                )
        except IntegrityError:
            # Concurrent delivery recorded it first; drop our increment
            await self.session.rollback()
            logger.warning(
                "Duplicate activity rejected by constraint", extra=context
            )
            return False

        await self.session.commit()
        logger.debug(
            "Affiliate activity recorded",
            extra={
                **context,
                "volume": str(volume) if volume is not None else None,
            },
        )
        return True

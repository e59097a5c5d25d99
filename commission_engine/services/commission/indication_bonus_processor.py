"""
Indication bonus processor.

Awards the flat one-time bonus per validated (affiliate, customer)
indication.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.enums import DomainEventType, IndicationStatus
from commission_engine.models.indication import Indication
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.repositories.indication_repository import (
    IndicationRepository,
)
from commission_engine.services.commission.config import INDICATION_BONUS
from commission_engine.services.event_publisher import EventPublisher
from commission_engine.utils.money import ZERO
from commission_engine.utils.time import utcnow


@dataclass
class IndicationBonusResult:
    """Result of indication bonus processing."""

    bonus_triggered: bool
    bonus_amount: Decimal = ZERO
    indication: Indication | None = None


class IndicationBonusProcessor:
    """Indication bonus with duplicate protection."""

    def __init__(
        self,
        session: AsyncSession,
        event_publisher: EventPublisher,
        bonus_amount: Decimal = INDICATION_BONUS,
    ) -> None:
        """
        Initialize indication bonus processor.

        Args:
            session: Database session
            event_publisher: Outbox writer
            bonus_amount: Flat bonus per indication
        """
        self.session = session
        self.event_publisher = event_publisher
        self.bonus_amount = bonus_amount
        self.affiliate_repo = AffiliateRepository(session)
        self.indication_repo = IndicationRepository(session)

    async def process(
        self, source_affiliate_id: str, customer_id: str
    ) -> IndicationBonusResult:
        """
        Award indication bonus once per pair.

        Args:
            source_affiliate_id: Referring affiliate
            customer_id: Referred customer

        Returns:
            IndicationBonusResult
        """
        if await self.indication_repo.has_active(
            source_affiliate_id, customer_id
        ):
            logger.debug(
                "Indication bonus already granted",
                extra={
                    "affiliate_id": source_affiliate_id,
                    "customer_id": customer_id,
                },
            )
            return IndicationBonusResult(bonus_triggered=False)

        if not await self.affiliate_repo.exists(id=source_affiliate_id):
            logger.warning(
                "Indication source affiliate not found",
                extra={"affiliate_id": source_affiliate_id},
            )
            return IndicationBonusResult(bonus_triggered=False)

        try:
            async with self.session.begin_nested():
                indication = await self.indication_repo.create(
                    source_affiliate_id=source_affiliate_id,
                    customer_id=customer_id,
                    status=IndicationStatus.VALIDATED.value,
                    bonus_amount=self.bonus_amount,
                    validated_at=utcnow(),
                )
        except IntegrityError:
            logger.warning(
                "Duplicate indication rejected by constraint",
                extra={
                    "affiliate_id": source_affiliate_id,
                    "customer_id": customer_id,
                },
            )
            return IndicationBonusResult(bonus_triggered=False)

        await self.affiliate_repo.credit_indication(
            source_affiliate_id, self.bonus_amount
        )
        await self.event_publisher.publish(
            DomainEventType.INDICATION_VALIDATED,
            {
                "indicationId": indication.id,
                "affiliateId": source_affiliate_id,
                "customerId": customer_id,
                "bonusAmount": str(self.bonus_amount),
            },
        )
        await self.session.commit()

        logger.info(
            "Indication bonus granted",
            extra={
                "indication_id": indication.id,
                "affiliate_id": source_affiliate_id,
                "customer_id": customer_id,
                "bonus_amount": str(self.bonus_amount),
            },
        )
        return IndicationBonusResult(
            bonus_triggered=True,
            bonus_amount=self.bonus_amount,
            indication=indication,
        )

"""
Commission distributor.

Distributes the fixed CPA pool across the affiliate hierarchy using each
beneficiary's category rate and inactivity decay. Every created level is
committed together with its balance credit and its outbox event, so a
fault after level N leaves levels 1..N durable and a re-run completes
the remainder.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.affiliate import Affiliate
from commission_engine.models.commission import Commission
from commission_engine.models.enums import (
    CommissionStatus,
    CommissionType,
    DomainEventType,
)
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.repositories.commission_repository import (
    CommissionRepository,
)
from commission_engine.services.commission.category_config_provider import (
    CategoryConfigProvider,
)
from commission_engine.services.commission.config import (
    CPA_BASE_AMOUNTS,
    HIERARCHY_DEPTH,
)
from commission_engine.services.commission.hierarchy_resolver import (
    HierarchyResolver,
)
from commission_engine.services.commission.inactivity_decay import (
    InactivityDecayCalculator,
)
from commission_engine.services.commission.transaction_validator import (
    CpaValidationInput,
)
from commission_engine.services.event_publisher import EventPublisher
from commission_engine.utils.money import ZERO, percent_of
from commission_engine.utils.time import utcnow


@dataclass
class DistributionResult:
    """Result of a distribution run."""

    commissions: list[Commission] = field(default_factory=list)
    total_distributed: Decimal = ZERO
    skipped_levels: list[int] = field(default_factory=list)


class CommissionDistributor:
    """CPA distribution over the affiliate hierarchy."""

    def __init__(
        self,
        session: AsyncSession,
        event_publisher: EventPublisher,
        config_provider: CategoryConfigProvider | None = None,
        decay_calculator: InactivityDecayCalculator | None = None,
        hierarchy_resolver: HierarchyResolver | None = None,
        max_depth: int = HIERARCHY_DEPTH,
    ) -> None:
        """
        Initialize commission distributor.

        Args:
            session: Database session
            event_publisher: Outbox writer
            config_provider: Category rate lookup
            decay_calculator: Inactivity decay lookup
            hierarchy_resolver: Sponsor chain resolver
            max_depth: Levels that receive a share (1..5)
        """
        self.session = session
        self.event_publisher = event_publisher
        self.config_provider = config_provider or CategoryConfigProvider()
        self.decay_calculator = decay_calculator or InactivityDecayCalculator()
        self.hierarchy_resolver = hierarchy_resolver or HierarchyResolver(
            session
        )
        self.max_depth = min(max_depth, len(CPA_BASE_AMOUNTS))
        self.affiliate_repo = AffiliateRepository(session)
        self.commission_repo = CommissionRepository(session)

    async def distribute(
        self,
        data: CpaValidationInput,
        hierarchy: list[Affiliate] | None = None,
        now: datetime | None = None,
    ) -> DistributionResult:
        """
        Create CPA commissions for a validated transaction.

        Levels already processed for this transaction and validation
        model are skipped, so the call is safe under redelivery.

        Args:
            data: Validated transaction
            hierarchy: Pre-resolved hierarchy (resolved if omitted)
            now: Reference time for decay

        Returns:
            DistributionResult with the commissions created by this call

        Raises:
            SQLAlchemyError: On storage failure (after earlier levels
                were committed)
        """
        if hierarchy is None:
            hierarchy = await self.hierarchy_resolver.resolve(
                data.affiliate_id, self.max_depth
            )
        now = now or utcnow()
        result = DistributionResult()

        for index, beneficiary in enumerate(hierarchy[: self.max_depth]):
            level = index + 1

            if await self.commission_repo.exists_for(
                data.transaction_id,
                beneficiary.id,
                level,
                data.validation_model,
            ):
                logger.debug(
                    "Commission already processed, skipping",
                    extra={
                        "transaction_id": data.transaction_id,
                        "affiliate_id": beneficiary.id,
                        "level": level,
                    },
                )
                result.skipped_levels.append(level)
                continue

            commission = await self._create_level(
                data, beneficiary, level, now
            )
            if commission is None:
                result.skipped_levels.append(level)
                continue

            result.commissions.append(commission)
            result.total_distributed += commission.final_amount

        logger.info(
            "CPA distribution completed",
            extra={
                "transaction_id": data.transaction_id,
                "created": len(result.commissions),
                "skipped": len(result.skipped_levels),
                "total_distributed": str(result.total_distributed),
            },
        )
        return result

    async def _create_level(
        self,
        data: CpaValidationInput,
        beneficiary: Affiliate,
        level: int,
        now: datetime,
    ) -> Commission | None:
        config = self.config_provider.get_config(
            beneficiary.category, beneficiary.category_level
        )
        base_amount = CPA_BASE_AMOUNTS[level - 1]
        percentage = config.rate_for(level)
        commission_amount = percent_of(base_amount, percentage)
        decay = self.decay_calculator.decay_for(
            beneficiary.last_activity_at, now
        )
        final_amount = self.decay_calculator.apply(commission_amount, decay)

        try:
            async with self.session.begin_nested():
                commission = await self.commission_repo.create(
                    affiliate_id=beneficiary.id,
                    source_affiliate_id=data.affiliate_id,
                    customer_id=data.customer_id,
                    transaction_id=data.transaction_id,
                    type=CommissionType.CPA.value,
                    level=level,
                    validation_model=data.validation_model,
                    base_amount=base_amount,
                    percentage=percentage,
                    commission_amount=commission_amount,
                    final_amount=final_amount,
                    status=CommissionStatus.CALCULATED.value,
                    extra_data={
                        "validationModel": data.validation_model,
                        "transactionType": data.transaction_type,
                        "decayApplied": str(decay),
                        "category": config.category,
                        "categoryLevel": config.level,
                    },
                )
        except IntegrityError:
            # Concurrent run inserted the same idempotency key
            logger.warning(
                "Duplicate commission rejected by constraint",
                extra={
                    "transaction_id": data.transaction_id,
                    "affiliate_id": beneficiary.id,
                    "level": level,
                },
            )
            return None

        await self.affiliate_repo.credit_commission(
            beneficiary.id, final_amount
        )
        await self.event_publisher.publish(
            DomainEventType.COMMISSION_CALCULATED,
            {
                **commission.to_dict(),
                "validationModel": data.validation_model,
            },
        )
        await self.session.commit()

        logger.info(
            "Commission created",
            extra={
                "commission_id": commission.id,
                "transaction_id": data.transaction_id,
                "affiliate_id": beneficiary.id,
                "level": level,
                "percentage": str(percentage),
                "final_amount": str(final_amount),
                "decay": str(decay),
            },
        )
        return commission

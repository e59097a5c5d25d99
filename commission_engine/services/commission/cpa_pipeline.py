"""
CPA pipeline.

Runs a validated-transaction event through validation, hierarchy
distribution, indication bonus and progression. A transaction that
fails validation is a normal negative outcome; storage failures are
raised as PersistenceFault for the consumer to retry.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.commission import Commission
from commission_engine.services.audit_service import AuditService
from commission_engine.services.commission.category_config_provider import (
    CategoryConfigProvider,
)
from commission_engine.services.commission.commission_distributor import (
    CommissionDistributor,
)
from commission_engine.services.commission.config import HIERARCHY_DEPTH
from commission_engine.services.commission.hierarchy_resolver import (
    HierarchyResolver,
)
from commission_engine.services.commission.indication_bonus_processor import (
    IndicationBonusProcessor,
)
from commission_engine.services.commission.progression_evaluator import (
    ProgressionEvaluator,
)
from commission_engine.services.commission.transaction_validator import (
    CpaValidationInput,
    TransactionValidator,
)
from commission_engine.services.event_publisher import EventPublisher
from commission_engine.utils.exceptions import (
    PersistenceFault,
    TransactionNotSettledError,
)
from commission_engine.utils.money import ZERO


@dataclass
class CpaCalculationResult:
    """Outcome of a CPA calculation run."""

    validation_passed: bool
    commissions: list[Commission] = field(default_factory=list)
    total_distributed: Decimal = ZERO
    bonus_triggered: bool = False
    bonus_amount: Decimal = ZERO
    level_up_triggered: bool = False
    new_category: str | None = None
    new_category_level: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render result in its wire shape."""
        data: dict[str, Any] = {
            "commissions": [c.to_dict() for c in self.commissions],
            "totalDistributed": str(self.total_distributed),
            "validationPassed": self.validation_passed,
            "bonusTriggered": self.bonus_triggered,
            "bonusAmount": str(self.bonus_amount),
            "levelUpTriggered": self.level_up_triggered,
        }
        if self.level_up_triggered:
            data["newCategory"] = self.new_category
            data["newCategoryLevel"] = self.new_category_level
        return data


class CpaPipeline:
    """CPA commission calculation orchestrator."""

    def __init__(
        self,
        session: AsyncSession,
        event_publisher: EventPublisher | None = None,
        audit_service: AuditService | None = None,
        config_provider: CategoryConfigProvider | None = None,
        max_depth: int = HIERARCHY_DEPTH,
    ) -> None:
        """
        Initialize CPA pipeline.

        Args:
            session: Database session
            event_publisher: Outbox writer
            audit_service: Audit trail writer
            config_provider: Category rate lookup
            max_depth: Hierarchy depth
        """
        self.session = session
        self.event_publisher = event_publisher or EventPublisher(session)
        self.audit_service = audit_service or AuditService(session)
        self.config_provider = config_provider or CategoryConfigProvider()
        self.max_depth = max_depth

        self.validator = TransactionValidator(session)
        self.hierarchy_resolver = HierarchyResolver(session)
        self.distributor = CommissionDistributor(
            session,
            self.event_publisher,
            config_provider=self.config_provider,
            hierarchy_resolver=self.hierarchy_resolver,
            max_depth=max_depth,
        )
        self.bonus_processor = IndicationBonusProcessor(
            session, self.event_publisher
        )
        self.progression_evaluator = ProgressionEvaluator(
            session,
            self.event_publisher,
            config_provider=self.config_provider,
        )

    async def calculate_cpa_commissions(
        self, data: CpaValidationInput
    ) -> CpaCalculationResult:
        """
        Calculate CPA commissions for a validated transaction.

        Args:
            data: Validated-transaction event

        Returns:
            CpaCalculationResult

        Raises:
            PersistenceFault: Storage failure (retryable)
            TransactionNotSettledError: Transaction not yet stored as
                completed (retryable)
        """
        context = {
            "affiliate_id": data.affiliate_id,
            "customer_id": data.customer_id,
            "transaction_id": data.transaction_id,
            "validation_model": data.validation_model,
        }

        try:
            if not await self.validator.validate(data):
                logger.info("CPA validation failed", extra=context)
                await self.audit_service.log_cpa_rejected(
                    data.transaction_id,
                    {
                        **context,
                        "transaction_type": data.transaction_type,
                        "transaction_amount": str(data.transaction_amount),
                    },
                )
                await self.session.commit()
                return CpaCalculationResult(validation_passed=False)

            hierarchy = await self.hierarchy_resolver.resolve(
                data.affiliate_id, self.max_depth
            )
            distribution = await self.distributor.distribute(
                data, hierarchy
            )
            bonus = await self.bonus_processor.process(
                data.affiliate_id, data.customer_id
            )
            progression = await self.progression_evaluator.evaluate(
                data.affiliate_id
            )

            result = CpaCalculationResult(
                validation_passed=True,
                commissions=distribution.commissions,
                total_distributed=distribution.total_distributed,
                bonus_triggered=bonus.bonus_triggered,
                bonus_amount=bonus.bonus_amount,
                level_up_triggered=progression.level_up_triggered,
                new_category=progression.new_category,
                new_category_level=progression.new_level,
            )

            await self.audit_service.log_cpa_calculated(
                data.transaction_id,
                {
                    **context,
                    "hierarchy_length": len(hierarchy),
                    "commissions_created": len(distribution.commissions),
                    "skipped_levels": distribution.skipped_levels,
                    "total_distributed": str(distribution.total_distributed),
                    "bonus_triggered": bonus.bonus_triggered,
                    "level_up_triggered": progression.level_up_triggered,
                },
            )
            await self.session.commit()

        except TransactionNotSettledError:
            await self.session.rollback()
            logger.warning("CPA transaction not settled yet", extra=context)
            await self.audit_service.log_cpa_not_settled(
                data.transaction_id, context
            )
            raise

        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("CPA calculation failed", extra=context)
            fault = PersistenceFault(
                f"CPA calculation failed: {e}",
                affiliate_id=data.affiliate_id,
                customer_id=data.customer_id,
                transaction_id=data.transaction_id,
            )
            await self.audit_service.log_cpa_error(
                data.transaction_id,
                {**context, "error": str(e)},
            )
            raise fault from e

        logger.info(
            "CPA calculation completed",
            extra={
                **context,
                "commissions": len(result.commissions),
                "total_distributed": str(result.total_distributed),
                "bonus_triggered": result.bonus_triggered,
                "level_up_triggered": result.level_up_triggered,
            },
        )
        return result

"""
Progression evaluator.

Promotes an affiliate one step along the category/level ladder when it
meets the next step's requirements. Progression never regresses.
"""

from dataclasses import dataclass
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.affiliate import Affiliate
from commission_engine.models.enums import DomainEventType
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.services.commission.category_config_provider import (
    CategoryConfig,
    CategoryConfigProvider,
)
from commission_engine.services.event_publisher import EventPublisher


@dataclass
class ProgressionResult:
    """Result of progression evaluation."""

    level_up_triggered: bool
    new_category: str | None = None
    new_level: int | None = None
    level_up_bonus: Decimal | None = None


class ProgressionEvaluator:
    """Category/level progression."""

    def __init__(
        self,
        session: AsyncSession,
        event_publisher: EventPublisher,
        config_provider: CategoryConfigProvider | None = None,
    ) -> None:
        """Initialize progression evaluator."""
        self.session = session
        self.event_publisher = event_publisher
        self.config_provider = config_provider or CategoryConfigProvider()
        self.affiliate_repo = AffiliateRepository(session)

    @staticmethod
    def meets_requirements(
        affiliate: Affiliate, config: CategoryConfig
    ) -> bool:
        """
        Check all requirements of a config.

        Args:
            affiliate: Affiliate to check
            config: Target config

        Returns:
            True if direct, total and commission minimums all hold
        """
        return (
            affiliate.direct_indications >= config.min_direct_indications
            and affiliate.total_indications >= config.min_total_indications
            and affiliate.total_commissions >= config.min_commissions
        )

    def _is_forward(self, affiliate: Affiliate, config: CategoryConfig) -> bool:
        current_rank = self.config_provider.category_rank(affiliate.category)
        next_rank = self.config_provider.category_rank(config.category)
        if next_rank != current_rank:
            return next_rank > current_rank
        return config.level > affiliate.category_level

    async def evaluate(self, affiliate_id: str) -> ProgressionResult:
        """
        Evaluate and apply one progression step.

        Args:
            affiliate_id: Affiliate ID

        Returns:
            ProgressionResult
        """
        affiliate = await self.affiliate_repo.get_by_id(
            affiliate_id, refresh=True
        )
        if affiliate is None:
            logger.warning(
                "Progression skipped, affiliate not found",
                extra={"affiliate_id": affiliate_id},
            )
            return ProgressionResult(level_up_triggered=False)

        next_config = self.config_provider.get_next_config(
            affiliate.category, affiliate.category_level
        )
        if next_config is None:
            return ProgressionResult(level_up_triggered=False)

        if not self.meets_requirements(affiliate, next_config):
            return ProgressionResult(level_up_triggered=False)

        if not self._is_forward(affiliate, next_config):
            logger.error(
                "Refusing non-forward progression",
                extra={
                    "affiliate_id": affiliate_id,
                    "category": affiliate.category,
                    "level": affiliate.category_level,
                    "next_category": next_config.category,
                    "next_level": next_config.level,
                },
            )
            return ProgressionResult(level_up_triggered=False)

        previous_category = affiliate.category
        previous_level = affiliate.category_level
        promoted = await self.affiliate_repo.promote(
            affiliate_id,
            from_category=previous_category,
            from_level=previous_level,
            to_category=next_config.category,
            to_level=next_config.level,
        )
        if not promoted:
            # Standing changed since it was read
            logger.warning(
                "Progression lost race, skipping",
                extra={"affiliate_id": affiliate_id},
            )
            await self.session.rollback()
            return ProgressionResult(level_up_triggered=False)

        await self.event_publisher.publish(
            DomainEventType.AFFILIATE_LEVEL_UP,
            {
                "affiliateId": affiliate_id,
                "previousCategory": previous_category,
                "previousLevel": previous_level,
                "newCategory": next_config.category,
                "newLevel": next_config.level,
                "levelUpBonus": str(next_config.level_up_bonus),
                "revShareLevel1": str(next_config.rev_share_level_1),
                "revShareLevels2to5": str(
                    next_config.rev_share_levels_2_to_5
                ),
            },
        )
        await self.session.commit()

        logger.info(
            "Affiliate promoted",
            extra={
                "affiliate_id": affiliate_id,
                "from": f"{previous_category}:{previous_level}",
                "to": f"{next_config.category}:{next_config.level}",
            },
        )
        return ProgressionResult(
            level_up_triggered=True,
            new_category=next_config.category,
            new_level=next_config.level,
            level_up_bonus=next_config.level_up_bonus,
        )

"""
Hierarchy resolver.

Walks the sponsor chain of an affiliate, nearest first.
"""

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.affiliate import Affiliate
from commission_engine.repositories.affiliate_repository import (
    AffiliateRepository,
)
from commission_engine.services.commission.config import HIERARCHY_DEPTH


class HierarchyResolver:
    """Resolves the commission hierarchy of an affiliate."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize hierarchy resolver."""
        self.session = session
        self.affiliate_repo = AffiliateRepository(session)

    async def resolve(
        self, affiliate_id: str, max_depth: int = HIERARCHY_DEPTH
    ) -> list[Affiliate]:
        """
        Get affiliate and its ancestors.

        Level 1 is the affiliate itself, level 2 its sponsor, and so on.
        The walk stops at max_depth, at a root affiliate, at a missing
        affiliate, or at an id already visited (cyclic sponsor graph).

        Args:
            affiliate_id: Source affiliate ID
            max_depth: Maximum number of levels

        Returns:
            List of affiliates, nearest first
        """
        chain: list[Affiliate] = []
        visited: set[str] = set()
        current_id: str | None = affiliate_id

        while current_id is not None and len(chain) < max_depth:
            if current_id in visited:
                logger.warning(
                    "Cycle in affiliate hierarchy",
                    extra={
                        "affiliate_id": affiliate_id,
                        "repeated_id": current_id,
                    },
                )
                break
            visited.add(current_id)

            affiliate = await self.affiliate_repo.get_by_id(
                current_id, refresh=True
            )
            if affiliate is None:
                if not chain:
                    logger.warning(
                        "Source affiliate not found",
                        extra={"affiliate_id": affiliate_id},
                    )
                break

            chain.append(affiliate)
            current_id = affiliate.sponsor_id

        logger.debug(
            "Affiliate hierarchy resolved",
            extra={
                "affiliate_id": affiliate_id,
                "max_depth": max_depth,
                "chain_length": len(chain),
            },
        )
        return chain

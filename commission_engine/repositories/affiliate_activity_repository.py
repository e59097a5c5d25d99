"""
AffiliateActivity repository.

Data access layer for AffiliateActivity model.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from commission_engine.models.affiliate_activity import AffiliateActivity
from commission_engine.repositories.base import BaseRepository


class AffiliateActivityRepository(BaseRepository[AffiliateActivity]):
    """AffiliateActivity repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize affiliate activity repository."""
        super().__init__(AffiliateActivity, session)

"""
Inactivity decay calculator.

Maps days since an affiliate's last activity to a commission
reduction percentage.
"""

from datetime import datetime
from decimal import Decimal

from commission_engine.services.commission.config import DECAY_TIERS
from commission_engine.utils.money import HUNDRED, ZERO, quantize_money
from commission_engine.utils.time import days_since


class InactivityDecayCalculator:
    """Decay percentage lookup."""

    def __init__(
        self, tiers: tuple[tuple[int, Decimal], ...] = DECAY_TIERS
    ) -> None:
        self.tiers = tiers

    def decay_for(
        self,
        last_activity_at: datetime | None,
        now: datetime | None = None,
    ) -> Decimal:
        """
        Get decay percentage.

        Args:
            last_activity_at: Last activity (None means no decay)
            now: Reference time

        Returns:
            Decay percentage (0, 15, 30 or 50)
        """
        if last_activity_at is None:
            return ZERO

        days = days_since(last_activity_at, now)
        for threshold, decay in self.tiers:
            if days > threshold:
                return decay
        return ZERO

    @staticmethod
    def apply(amount: Decimal, decay: Decimal) -> Decimal:
        """Reduce amount by decay percentage."""
        return quantize_money(amount * (HUNDRED - decay) / HUNDRED)

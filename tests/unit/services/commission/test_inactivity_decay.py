"""
Unit tests for InactivityDecayCalculator.

Tests decay tiers and their application.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from commission_engine.services.commission.inactivity_decay import (
    InactivityDecayCalculator,
)

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def calculator() -> InactivityDecayCalculator:
    """Calculator with the default tiers."""
    return InactivityDecayCalculator()


class TestDecayFor:
    """Tests for decay_for()."""

    @pytest.mark.parametrize(
        "days,expected",
        [
            (0, "0"),
            (30, "0"),
            (31, "15"),
            (60, "15"),
            (61, "30"),
            (90, "30"),
            (91, "50"),
            (400, "50"),
        ],
    )
    def test_tiers(self, calculator, days, expected):
        """Test tier boundaries (strictly greater than)."""
        last_activity = NOW - timedelta(days=days)

        assert calculator.decay_for(last_activity, NOW) == Decimal(expected)

    def test_partial_day_is_floored(self, calculator):
        """Test 30 days and 23 hours still counts as 30 days."""
        last_activity = NOW - timedelta(days=30, hours=23)

        assert calculator.decay_for(last_activity, NOW) == Decimal("0")

    def test_no_activity_means_no_decay(self, calculator):
        """Test affiliate without recorded activity."""
        assert calculator.decay_for(None, NOW) == Decimal("0")

    def test_naive_timestamp_treated_as_utc(self, calculator):
        """Test naive datetimes from the database."""
        last_activity = (NOW - timedelta(days=95)).replace(tzinfo=None)

        assert calculator.decay_for(last_activity, NOW) == Decimal("50")

    def test_monotonic(self, calculator):
        """Test decay never decreases with longer inactivity."""
        values = [
            calculator.decay_for(NOW - timedelta(days=days), NOW)
            for days in range(0, 200)
        ]

        assert values == sorted(values)
        assert set(values) == {
            Decimal("0"), Decimal("15"), Decimal("30"), Decimal("50")
        }


class TestApply:
    """Tests for apply()."""

    def test_half_decay(self):
        """Test 50% decay on a level-1 jogador commission."""
        result = InactivityDecayCalculator.apply(Decimal("0.35"), Decimal("50"))

        assert result == Decimal("0.175")

    def test_no_decay(self):
        """Test zero decay keeps the amount."""
        result = InactivityDecayCalculator.apply(Decimal("0.30"), Decimal("0"))

        assert result == Decimal("0.30")

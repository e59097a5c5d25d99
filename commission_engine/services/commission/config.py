"""
Commission engine configuration.

Fixed business constants of the CPA program. They are product
constants rather than deployment settings.
"""

from decimal import Decimal

# Default hierarchy depth (levels 1..5)
HIERARCHY_DEPTH = 5

# CPA base amount per hierarchy level; sums to the fixed pool
CPA_BASE_AMOUNTS: tuple[Decimal, ...] = (
    Decimal("35.00"),  # Level 1 (source affiliate)
    Decimal("10.00"),  # Level 2
    Decimal("5.00"),  # Level 3
    Decimal("5.00"),  # Level 4
    Decimal("5.00"),  # Level 5
)
CPA_POOL_TOTAL = Decimal("60.00")

# Flat one-time bonus per validated indication
INDICATION_BONUS = Decimal("5.00")

# Model 1.1 - first deposit
FIRST_DEPOSIT_MIN_AMOUNT = Decimal("50.00")

# Model 1.2 - trailing activity
ACTIVITY_WINDOW_DAYS = 30
ACTIVITY_MIN_TRANSACTIONS = 3
ACTIVITY_MIN_VOLUME = Decimal("200.00")

# Inactivity decay: (days strictly above, reduction %), highest first
DECAY_TIERS: tuple[tuple[int, Decimal], ...] = (
    (90, Decimal("50")),
    (60, Decimal("30")),
    (30, Decimal("15")),
)

"""
Money helpers.

All amounts are ``Decimal`` with the 8-place scale of the money columns.
"""

from decimal import ROUND_HALF_UP, Decimal

MONEY_QUANT = Decimal("0.00000001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """
    Convert value to Decimal without float artefacts.

    Args:
        value: Numeric value or numeric string

    Returns:
        Decimal value
    """
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
    """Round amount to the storage scale."""
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    """
    Apply percentage to amount.

    Args:
        amount: Base amount
        percentage: Percentage (e.g. 3 for 3%)

    Returns:
        amount * percentage / 100, at storage scale
    """
    return quantize_money(amount * percentage / HUNDRED)

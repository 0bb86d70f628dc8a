"""
Commission calculator.

Pure money arithmetic: amount x locked rate, rounded half-up to cents.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from genius_referrals.config.business_constants import CENTS
from genius_referrals.utils.exceptions import ValidationError


def _as_decimal(value: Decimal | int | str, name: str) -> Decimal:
    if isinstance(value, float):
        raise ValidationError(f"{name} must be Decimal, not float", **{name: value})
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise ValidationError(f"{name} is not a number", **{name: str(value)}) from e
    if not result.is_finite():
        raise ValidationError(f"{name} is not a number", **{name: str(value)})
    return result


def calculate_commission(
    transaction_amount: Decimal | int | str,
    locked_rate: Decimal | int | str,
) -> Decimal:
    """
    Calculate commission for a completed transaction.

    Args:
        transaction_amount: Transaction amount in dollars
        locked_rate: Rate locked on the lead (0.10 = 10%)

    Returns:
        Commission in dollars, two decimal places

    Raises:
        ValidationError: Negative or non-numeric input

    Example:
        >>> calculate_commission(Decimal("149.99"), Decimal("0.10"))
        Decimal('15.00')
    """
    amount = _as_decimal(transaction_amount, "transaction_amount")
    rate = _as_decimal(locked_rate, "locked_rate")

    if amount < 0:
        raise ValidationError(
            "Transaction amount cannot be negative", transaction_amount=str(amount)
        )
    if rate < 0:
        raise ValidationError("Commission rate cannot be negative", rate=str(rate))

    return (amount * rate).quantize(CENTS, rounding=ROUND_HALF_UP)

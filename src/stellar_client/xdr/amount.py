"""
Conversion between decimal asset amounts and integer stroops.

One unit of any asset is 10,000,000 stroops; amounts travel on the wire as
int64 stroops.
"""

from decimal import Decimal, InvalidOperation
from typing import Union

from ..codec.writer import INT64_MAX, INT64_MIN, check_range
from ..runtime.errors import XdrRangeError

STROOPS_EXPONENT = -7
STROOPS_PER_UNIT = 10 ** -STROOPS_EXPONENT


def to_stroops(amount: Union[str, Decimal, int]) -> int:
    """
    Convert a decimal amount such as ``"12.5"`` to stroops.

    Raises:
        XdrRangeError: If the amount is not a number, has more than 7
            decimal places, or does not fit in int64
    """
    if isinstance(amount, (bool, float)):
        raise XdrRangeError(f"amount must be a str, Decimal or int, got {type(amount).__name__}")
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError, ValueError) as e:
        raise XdrRangeError(f"invalid amount {amount!r}") from e
    if not value.is_finite():
        raise XdrRangeError(f"invalid amount {amount!r}")
    stroops = value.scaleb(-STROOPS_EXPONENT)
    if stroops != stroops.to_integral_value():
        raise XdrRangeError(f"amount {amount} has more than {-STROOPS_EXPONENT} decimal places")
    return check_range("amount", int(stroops), INT64_MIN, INT64_MAX)


def from_stroops(stroops: int, places: int = -STROOPS_EXPONENT) -> str:
    """Format stroops as a decimal amount with the given number of places."""
    check_range("amount", stroops, INT64_MIN, INT64_MAX)
    return f"{Decimal(stroops).scaleb(STROOPS_EXPONENT):.{places}f}"

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Union

from grantcart.errors import InvalidAmountError

Number = Union[int, float, str, Decimal]


def to_decimal(value: Number) -> Decimal:
    """Human-readable amount as an exact Decimal.

    Floats go through ``str`` so that 0.1 stays 0.1 rather than its binary
    expansion.
    """
    if isinstance(value, bool):
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise InvalidAmountError(f"Invalid amount: {value!r}")
    return amount


def parse_units(amount: Number, decimals: int) -> int:
    """Convert a human amount to integer base units, e.g. 1.5 DAI -> 1.5e18."""
    scaled = to_decimal(amount).scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise InvalidAmountError(
            f"Amount {amount} has more than {decimals} decimal places"
        )
    return int(scaled)


def format_units(value: int, decimals: int) -> Decimal:
    return Decimal(value).scaleb(-decimals).normalize()


def require_positive_amount(value: Number, decimals: int) -> Decimal:
    amount = to_decimal(value)
    if amount <= 0:
        raise InvalidAmountError("amount must be > 0")
    parse_units(amount, decimals)
    return amount

#!/usr/bin/env python3
"""
Currency Conversion Utilities

The bank feed reports amounts as decimal dollars (floats in JSON); YNAB
stores amounts as integer milliunits (1000 milliunits = $1.00).

Key Principles:
- Never multiply floats directly for currency
- Convert through Decimal(str(x)) so 4.35 stays 4.35, not 4.3499999...
- Truncate toward zero when going to milliunits
"""

from decimal import Decimal, InvalidOperation
from typing import Union


def dollars_to_milliunits(amount: Union[float, int, str, Decimal]) -> int:
    """
    Convert a signed dollar amount to YNAB milliunits, truncating toward zero.

    Args:
        amount: Dollar amount from the bank feed (negative = outflow)

    Returns:
        Signed integer milliunits

    Raises:
        ValueError: If amount isn't numeric

    Examples:
        dollars_to_milliunits(-45.99) -> -45990
        dollars_to_milliunits(4.35) -> 4350
        dollars_to_milliunits(0.0001) -> 0
    """
    if isinstance(amount, bool):
        raise ValueError(f"Invalid amount: {amount!r}")
    try:
        decimal_amount = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount!r}") from e
    if not decimal_amount.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    return int(decimal_amount * 1000)


def milliunits_to_dollars_str(milliunits: int) -> str:
    """
    Format milliunits as a dollar string using integer arithmetic.

    Sub-cent milliunits are dropped (YNAB only displays cents).

    Example:
        milliunits_to_dollars_str(-45990) -> "-45.99"
    """
    is_negative = milliunits < 0
    abs_cents = abs(int(milliunits)) // 10

    dollars = abs_cents // 100
    remainder = abs_cents % 100

    if is_negative:
        return f"-{dollars}.{remainder:02d}"
    return f"{dollars}.{remainder:02d}"


def format_milliunits(milliunits: int) -> str:
    """Format milliunits for display, e.g. "$-45.99"."""
    return f"${milliunits_to_dollars_str(milliunits)}"

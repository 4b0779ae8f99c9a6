"""Money helpers for the store.

Amounts are stored as ``Numeric(10, 2)`` and handled as ``Decimal`` in
Python. Display strings follow the storefront: ``KES 3,999`` for whole
amounts and ``KES 3,999.50`` otherwise.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_decimal(amount: Number | None) -> Decimal:
    """Coerce an amount to a two-place Decimal (round half-up). None is zero."""
    if amount is None:
        return Decimal("0.00")
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount: Number | None, currency: str = "KES") -> str:
    """Format an amount for display, e.g. ``KES 45,000``."""
    value = to_decimal(amount)
    if value == value.to_integral_value():
        return f"{currency} {value:,.0f}"
    return f"{currency} {value:,.2f}"

"""Decimal money helpers.

Order totals are stored as NUMERIC(12, 2) in major units; the gateway expects
integer minor units (kobo/cents).
"""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Normalise to a 2-place Decimal. Floats go through str() to avoid binary noise."""
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal | int | float | str) -> int:
    """Convert a major-unit amount to integer minor units: Decimal('10.50') -> 1050."""
    return int((to_money(amount) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))

# Overview: Price policy; pure functions, no database access.

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from ..validation import CENT, to_decimal


MIN_DISCOUNT_PERCENT = Decimal("0")
MAX_DISCOUNT_PERCENT = Decimal("90")


def clamp_discount_percent(percent) -> Decimal:
    """Clamp a discount percentage to [0, 90]."""
    value = to_decimal(percent, "percent")
    if value < MIN_DISCOUNT_PERCENT:
        return MIN_DISCOUNT_PERCENT
    if value > MAX_DISCOUNT_PERCENT:
        return MAX_DISCOUNT_PERCENT
    return value


def discounted_price(price, percent) -> Decimal:
    """
    Apply a percentage discount to a price.

    percent is clamped to [0, 90] first; the result is
    round(price * (1 - percent / 100), 2) with half-up rounding.

    discounted_price(100, 95) == discounted_price(100, 90) == Decimal("10.00")
    """
    amount = to_decimal(price, "price")
    pct = clamp_discount_percent(percent)
    return (amount * (1 - pct / 100)).quantize(CENT, rounding=ROUND_HALF_UP)

"""
Pricing component.

Pure functions computing the amount due from a base price and an
optional coupon.

Rounding: round-half-up to a whole currency unit, so 49 at 50% off is 25.
The result is clamped to [0, rounded base price].
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from paid_access.domain.entities import Coupon, PaymentSettings

from .models import PricingState

_HUNDRED = Decimal(100)


def round_half_up(value: Decimal | float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_final_amount(base_price: float, coupon: Coupon | None = None) -> int:
    """
    Amount due in whole currency units.

    Args:
        base_price: Non-negative base price
        coupon: Optional applied coupon

    Returns:
        max(0, round_half_up(base_price * (1 - discount / 100))), never above
        the rounded base price. A 100% coupon always yields 0.
    """
    if not math.isfinite(base_price):
        raise ValueError(f"base_price must be finite, got {base_price}")
    if base_price < 0:
        raise ValueError(f"base_price must be non-negative, got {base_price}")

    discount = Decimal(str(coupon.discount_percent)) if coupon else Decimal(0)
    if discount >= _HUNDRED:
        return 0

    base = Decimal(str(base_price))
    discounted = base * (_HUNDRED - discount) / _HUNDRED

    return min(max(0, round_half_up(discounted)), round_half_up(base))


def resolve_base_price(settings: PaymentSettings, price_override: float | None = None) -> float:
    """Item price override when given, else the configured base price."""
    if price_override is not None:
        if not math.isfinite(price_override):
            raise ValueError(f"price_override must be finite, got {price_override}")
        if price_override < 0:
            raise ValueError(f"price_override must be non-negative, got {price_override}")
        return price_override
    return settings.base_price


# --- State transitions ---


def price_for(base_price: float, coupon: Coupon | None = None) -> PricingState:
    """Build a PricingState for a base price and optional coupon."""
    return PricingState(
        base_price=base_price,
        final_amount=compute_final_amount(base_price, coupon),
        applied_coupon=coupon,
    )


def apply_coupon(state: PricingState, coupon: Coupon) -> PricingState:
    """Replace any applied coupon with `coupon` and recompute."""
    return price_for(state.base_price, coupon)


def remove_coupon(state: PricingState) -> PricingState:
    """Drop the applied coupon, restoring the pre-coupon amount."""
    return price_for(state.base_price, None)

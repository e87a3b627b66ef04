"""
Pricing component - amount due from base price and coupon.
"""

from .component import (
    apply_coupon,
    compute_final_amount,
    price_for,
    remove_coupon,
    resolve_base_price,
    round_half_up,
)
from .models import PricingState

__all__ = [
    # Functions
    "compute_final_amount",
    "round_half_up",
    "resolve_base_price",
    "price_for",
    "apply_coupon",
    "remove_coupon",
    # Models
    "PricingState",
]

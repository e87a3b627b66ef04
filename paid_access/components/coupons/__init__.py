"""
Coupons component - promo code lookup.
"""

from .component import normalize_code, run, validate_coupon
from .models import ValidateCouponInput, ValidateCouponOutput

__all__ = [
    "run",
    "validate_coupon",
    "normalize_code",
    "ValidateCouponInput",
    "ValidateCouponOutput",
]

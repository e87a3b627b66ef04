"""
Coupons component.

Looks up a user-entered promo code among the active coupons.
Matching is exact after trimming, case-insensitive, no partial matches.
"""

from __future__ import annotations

from collections.abc import Iterable

from paid_access.domain.entities import Coupon
from paid_access.domain.errors import CouponNotFoundError, EmptyCodeError, PromoCodeError

from .models import ValidateCouponInput, ValidateCouponOutput


def normalize_code(raw_code: str) -> str:
    return raw_code.strip().casefold()


def validate_coupon(raw_code: str, available: Iterable[Coupon]) -> Coupon:
    """
    Resolve a promo code to an active coupon.

    Args:
        raw_code: Code as typed by the user
        available: Active coupons, in configured order

    Returns:
        The first coupon whose code matches case-insensitively.

    Raises:
        EmptyCodeError: Code is empty after trimming (checked before lookup)
        CouponNotFoundError: No coupon matches
    """
    wanted = normalize_code(raw_code)
    if not wanted:
        raise EmptyCodeError()

    for coupon in available:
        if normalize_code(coupon.code) == wanted:
            return coupon

    raise CouponNotFoundError(raw_code.strip())


def run(input_data: ValidateCouponInput) -> ValidateCouponOutput:
    """Validate a promo code, returning errors as data for inline display."""
    try:
        coupon = validate_coupon(input_data.raw_code, input_data.available)
    except PromoCodeError as e:
        return ValidateCouponOutput(coupon=None, error_code=e.code, message=e.message)

    return ValidateCouponOutput(coupon=coupon)

"""
Coupons component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from paid_access.domain.entities import Coupon


@dataclass(frozen=True)
class ValidateCouponInput:
    """Input for validating a user-entered promo code."""

    raw_code: str
    available: tuple[Coupon, ...]


@dataclass(frozen=True)
class ValidateCouponOutput:
    """Validation result; exactly one of coupon / error is set."""

    coupon: Coupon | None
    error_code: str | None = None
    message: str | None = None

    @property
    def success(self) -> bool:
        return self.coupon is not None

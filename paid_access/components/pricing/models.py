"""
Pricing component models.

PricingState is owned by the orchestrating caller and replaced (never
mutated) whenever the base price or the applied coupon changes.
"""

from __future__ import annotations

from dataclasses import dataclass

from paid_access.domain.entities import Coupon


@dataclass(frozen=True)
class PricingState:
    """
    Displayed price for one modal lifecycle.

    Invariant: final_amount == compute_final_amount(base_price, applied_coupon)
    """

    base_price: float
    final_amount: int
    applied_coupon: Coupon | None = None

    @property
    def discount_percent(self) -> float:
        return self.applied_coupon.discount_percent if self.applied_coupon else 0

    @property
    def savings(self) -> float:
        """Base price minus amount due, for the "N% off" line."""
        return max(0, self.base_price - self.final_amount)

    @property
    def is_free(self) -> bool:
        return self.final_amount == 0

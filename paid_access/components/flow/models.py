"""
Payment flow models.
"""

from __future__ import annotations

from dataclasses import dataclass

from paid_access.components.pricing import PricingState
from paid_access.domain.errors import GrantNotificationError
from paid_access.domain.outcomes import PaymentFailure, PaymentOutcome, grants_access


@dataclass(frozen=True)
class PromoOutput:
    """Result of applying a promo code; pricing is unchanged on error."""

    pricing: PricingState
    applied: bool
    message: str | None = None


@dataclass(frozen=True)
class PayOutput:
    """
    Result of a pay attempt.

    outcome is None when checkout could not start (gateway unavailable);
    message is what the user sees, None for a plain dismissal.
    grant_error is set when the payment succeeded but on_success raised;
    the callback error is its __cause__.
    """

    outcome: PaymentOutcome | None
    message: str | None = None
    grant_error: GrantNotificationError | None = None

    @property
    def granted(self) -> bool:
        return self.outcome is not None and grants_access(self.outcome)

    @property
    def blocking(self) -> bool:
        return isinstance(self.outcome, PaymentFailure) and self.outcome.is_blocking


def describe_duration(minutes: int) -> str:
    """60 -> "1-hour", 90 -> "90-minute"."""
    if minutes % 60 == 0:
        return f"{minutes // 60}-hour"
    return f"{minutes}-minute"

"""
Error taxonomy for the checkout core.

Payment and verification failures are not raised: they are returned as
PaymentFailure outcomes so every checkout attempt resolves exactly once.
"""

from __future__ import annotations

from paid_access.domain.outcomes import GrantingOutcome


class PaymentError(Exception):
    """Base checkout-core error."""

    pass


class ConfigError(PaymentError):
    """Payment settings could not be loaded; callers fall back to defaults."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Payment settings unavailable: {reason}")


# --- Promo codes ---


class PromoCodeError(PaymentError):
    """Promo code rejected. Shown inline, never escalated."""

    code = "invalid_promo"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmptyCodeError(PromoCodeError):
    """Nothing left after trimming the entered code."""

    code = "empty_code"

    def __init__(self) -> None:
        super().__init__("Please enter a promo code")


class CouponNotFoundError(PromoCodeError):
    """No active coupon matches the entered code."""

    code = "not_found"

    def __init__(self, raw_code: str) -> None:
        self.raw_code = raw_code
        super().__init__("Invalid promo code")


# --- Gateway / checkout ---


class GatewayUnavailableError(PaymentError):
    """Gateway client runtime failed to load."""

    def __init__(self, reason: str = "Payment system failed to load") -> None:
        self.reason = reason
        super().__init__(reason)


class GatewayNotReadyError(GatewayUnavailableError):
    """Checkout requested before the gateway runtime finished loading."""

    def __init__(self) -> None:
        super().__init__("Payment system is loading. Please wait a moment and try again.")


class CheckoutBusyError(PaymentError):
    """A checkout session is already open on this orchestrator."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Checkout session {session_id} is still open")


class GrantNotificationError(PaymentError):
    """
    The caller's on_success callback raised for a granting outcome.

    The payment still stands: `outcome` carries it, the callback error is
    the cause.
    """

    def __init__(self, outcome: GrantingOutcome) -> None:
        self.outcome = outcome
        super().__init__(f"Access grant notification failed for token {outcome.payment_token}")


class FlowStateError(PaymentError):
    """Payment flow used outside its open lifecycle."""

    pass

"""
Payment flow component.

Drives one payment modal: loads settings and the gateway runtime, keeps
the PricingState in step with promo codes, runs checkout, and reports
the modal closing without a successful outcome.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from paid_access.components.checkout import CheckoutMetadata, CheckoutOrchestrator
from paid_access.components.coupons import ValidateCouponInput
from paid_access.components.coupons import run as run_validate_coupon
from paid_access.components.pricing import (
    PricingState,
    apply_coupon,
    price_for,
    remove_coupon,
    resolve_base_price,
)
from paid_access.components.settings import (
    LoadSettingsOutput,
    SettingsProviderPort,
    load_payment_settings,
)
from paid_access.domain.errors import (
    CheckoutBusyError,
    FlowStateError,
    GatewayUnavailableError,
    GrantNotificationError,
)
from paid_access.domain.outcomes import (
    FreeAccess,
    PaymentDismissed,
    PaymentFailure,
    PaymentOutcome,
    PaymentSuccess,
    grants_access,
)
from paid_access.rules.models import Rules

from .models import PayOutput, PromoOutput, describe_duration

logger = logging.getLogger(__name__)


class PaymentFlow:
    """
    One payment modal lifecycle.

    Args:
        orchestrator: Checkout orchestrator wired to the caller's on_success
        settings_provider: Source of payment settings
        rules: Loaded rules
        on_close: Called once when the modal closes without a successful
            outcome; never after a grant
    """

    def __init__(
        self,
        orchestrator: CheckoutOrchestrator,
        settings_provider: SettingsProviderPort,
        rules: Rules,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._orchestrator = orchestrator
        self._settings_provider = settings_provider
        self._rules = rules
        self._on_close = on_close
        self._outcome_at_open: PaymentOutcome | None = None
        self._reset()
        self._closed = True

    def _reset(self) -> None:
        self._item_id: str | None = None
        self._loaded: LoadSettingsOutput | None = None
        self._pricing: PricingState | None = None
        self.promo_error: str | None = None
        self.gateway_error: str | None = None
        self.payment_message: str | None = None
        self.is_loading = False
        self._granted = False

    # --- State ---

    @property
    def is_open(self) -> bool:
        return not self._closed and self._pricing is not None

    @property
    def pricing(self) -> PricingState:
        if self._pricing is None or self._closed:
            raise FlowStateError("Payment flow is not open")
        return self._pricing

    @property
    def settings_source(self) -> str | None:
        return self._loaded.source if self._loaded else None

    @property
    def currency(self) -> str:
        if self._loaded is None:
            return self._rules.pricing.currency
        return self._loaded.settings.currency

    # --- Lifecycle ---

    async def open(self, item_id: str, price_override: float | None = None) -> PricingState | None:
        """
        Open the modal for `item_id`.

        Settings and the gateway runtime load concurrently. A gateway load
        failure is recorded in `gateway_error`, not raised.

        Returns:
            Initial pricing, or None if the modal was closed while loading.
        """
        if self._orchestrator.session_open:
            raise CheckoutBusyError(self._orchestrator.session_id or "")

        self._reset()
        self._closed = False
        self._item_id = item_id
        self._outcome_at_open = self._orchestrator.last_outcome

        loaded, _ = await asyncio.gather(
            load_payment_settings(self._settings_provider, self._rules),
            self._ensure_gateway(),
        )
        if self._closed:
            logger.debug("Payment flow for %s closed while loading", item_id)
            return None

        self._loaded = loaded
        base_price = resolve_base_price(loaded.settings, price_override)
        self._pricing = price_for(base_price)
        return self._pricing

    async def _ensure_gateway(self) -> None:
        try:
            await self._orchestrator.ensure_gateway_ready()
        except GatewayUnavailableError as e:
            self.gateway_error = e.reason

    def close(self) -> None:
        """
        Close the modal. No-op if already closed.

        Raises:
            CheckoutBusyError: A gateway session is open; only the user's
                dismissal or the gateway timeout can end it
        """
        if self._orchestrator.session_open:
            raise CheckoutBusyError(self._orchestrator.session_id or "")
        if self._closed:
            return

        granted = self._granted or self._granted_while_detached()
        self._reset()
        self._closed = True
        if not granted and self._on_close is not None:
            self._on_close()

    def _granted_while_detached(self) -> bool:
        # A pay() that was cancelled leaves its session running to completion
        last = self._orchestrator.last_outcome
        return last is not None and last is not self._outcome_at_open and grants_access(last)

    # --- Promo codes ---

    def apply_promo(self, raw_code: str) -> PromoOutput:
        """Apply a promo code. A rejected code keeps any coupon already applied."""
        pricing = self._require_idle_pricing()
        coupons = self._loaded.settings.active_coupons if self._loaded else ()

        result = run_validate_coupon(ValidateCouponInput(raw_code=raw_code, available=coupons))
        if result.coupon is None:
            self.promo_error = result.message
            return PromoOutput(pricing=pricing, applied=False, message=result.message)

        self.promo_error = None
        self._pricing = apply_coupon(pricing, result.coupon)
        return PromoOutput(pricing=self._pricing, applied=True)

    def remove_promo(self) -> PricingState:
        pricing = self._require_idle_pricing()
        self.promo_error = None
        self._pricing = remove_coupon(pricing)
        return self._pricing

    def _require_idle_pricing(self) -> PricingState:
        pricing = self.pricing
        if self._orchestrator.session_open:
            raise CheckoutBusyError(self._orchestrator.session_id or "")
        return pricing

    # --- Checkout ---

    async def pay(self) -> PayOutput:
        """
        Run checkout for the current final amount.

        Raises:
            FlowStateError: Flow not open
            CheckoutBusyError: A session is already open
        """
        pricing = self._require_idle_pricing()

        metadata = CheckoutMetadata(
            item_id=self._item_id or "",
            access_duration=self._rules.access.duration_tag,
            coupon_code=pricing.applied_coupon.code if pricing.applied_coupon else None,
        )

        self.payment_message = None
        self.is_loading = True
        grant_error: GrantNotificationError | None = None
        outcome: PaymentOutcome
        try:
            outcome = await self._orchestrator.start_checkout(pricing.final_amount, metadata)
        except GatewayUnavailableError as e:
            self.payment_message = e.reason
            return PayOutput(outcome=None, message=e.reason)
        except GrantNotificationError as e:
            logger.error("Payment %s succeeded but on_success failed", e.outcome.payment_token)
            outcome = e.outcome
            grant_error = e
        finally:
            self.is_loading = False

        message = self._message_for(outcome)
        self.payment_message = message
        if isinstance(outcome, (PaymentSuccess, FreeAccess)):
            self._granted = True
            self._pricing = None
            self._closed = True
        return PayOutput(outcome=outcome, message=message, grant_error=grant_error)

    def _message_for(self, outcome: PaymentOutcome) -> str | None:
        duration = describe_duration(self._rules.access.duration_minutes)
        if isinstance(outcome, PaymentSuccess):
            return f"Payment successful! You now have {duration} access to this item."
        if isinstance(outcome, FreeAccess):
            return f"Free access unlocked! You now have {duration} access to this item."
        if isinstance(outcome, PaymentFailure):
            return outcome.message
        if isinstance(outcome, PaymentDismissed):
            return None
        raise TypeError(f"Unknown outcome type: {type(outcome)}")

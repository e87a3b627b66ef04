"""
CheckoutSession - one live gateway session.

Turns the gateway's callbacks into a single awaited outcome. The first
callback wins; later callbacks, and any callback after the session is
closed, are logged and ignored.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any
from uuid import uuid4

from paid_access.components.outcomes import (
    VERIFICATION_FAILED_MESSAGE,
    classify_failure,
    decode_failure_payload,
)
from paid_access.domain.outcomes import (
    FailureKind,
    PaymentDismissed,
    PaymentFailure,
    PaymentOutcome,
    PaymentSuccess,
)

from .models import CheckoutConfig, SessionHandlers

logger = logging.getLogger(__name__)


def _token_problem(token: str, config: CheckoutConfig) -> str | None:
    if not token.strip():
        return "missing payment token"
    if config.token_prefix and not token.startswith(config.token_prefix):
        return f"token does not start with {config.token_prefix!r}"
    if token.startswith(config.free_token_prefix):
        return "token collides with the free-access prefix"
    return None


def decode_success_payload(
    payload: Any,
    amount: int,
    config: CheckoutConfig,
) -> PaymentSuccess | PaymentFailure:
    """
    Decode a gateway success payload.

    A payload without a usable token is a VERIFICATION_FAILED failure:
    money may have moved, so it is never treated as success.
    """
    token = payload.get(config.token_field) if isinstance(payload, Mapping) else None
    if not isinstance(token, str):
        token = ""

    problem = _token_problem(token, config)
    if problem is not None:
        logger.error("Payment verification failed: %s", problem)
        return PaymentFailure(
            kind=FailureKind.VERIFICATION_FAILED,
            message=VERIFICATION_FAILED_MESSAGE,
        )

    return PaymentSuccess(payment_token=token, amount=amount)


class CheckoutSession:
    def __init__(self, amount: int, config: CheckoutConfig) -> None:
        self.session_id = uuid4().hex
        self.amount = amount
        self._config = config
        self._outcome: asyncio.Future[PaymentOutcome] = (
            asyncio.get_running_loop().create_future()
        )
        self._closed = False

    @property
    def resolved(self) -> bool:
        return self._outcome.done()

    def handlers(self) -> SessionHandlers:
        return SessionHandlers(
            on_success=self.on_success,
            on_failure=self.on_failure,
            on_dismiss=self.on_dismiss,
        )

    async def wait(self) -> PaymentOutcome:
        return await self._outcome

    def close(self) -> None:
        """Discard the session; callbacks after this are ignored."""
        self._closed = True

    # --- Gateway callbacks ---

    def on_success(self, payload: Mapping[str, Any]) -> bool:
        return self.resolve(decode_success_payload(payload, self.amount, self._config))

    def on_failure(self, payload: Mapping[str, Any]) -> bool:
        code, description = decode_failure_payload(payload)
        classified = classify_failure(code, description)
        logger.warning("Payment failed: code=%s kind=%s", code, classified.kind.value)
        return self.resolve(
            PaymentFailure(kind=classified.kind, message=classified.message, provider_code=code)
        )

    def on_dismiss(self) -> bool:
        logger.info("Checkout session %s dismissed", self.session_id)
        return self.resolve(PaymentDismissed())

    def resolve(self, outcome: PaymentOutcome) -> bool:
        """Set the outcome if this is the first terminal callback."""
        if self._closed or self._outcome.done():
            logger.warning(
                "Ignoring %s for finished session %s", type(outcome).__name__, self.session_id
            )
            return False
        self._outcome.set_result(outcome)
        return True

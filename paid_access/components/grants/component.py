"""
Grants component.

Single notification point for unlocks. Free-access tokens carry a
reserved prefix so storage can tell them from gateway-issued tokens.
"""

from __future__ import annotations

import inspect
import logging
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from paid_access.domain.outcomes import FreeAccess, PaymentOutcome, PaymentSuccess

from .models import DEFAULT_FREE_TOKEN_PREFIX, AccessGrant
from .ports import GrantCallback

logger = logging.getLogger(__name__)


def generate_free_access_token(prefix: str = DEFAULT_FREE_TOKEN_PREFIX) -> str:
    return f"{prefix}{uuid4().hex}"


def is_free_access_token(token: str, prefix: str = DEFAULT_FREE_TOKEN_PREFIX) -> bool:
    return token.startswith(prefix)


def build_access_grant(
    item_id: str,
    payment_token: str,
    amount: int,
    duration: timedelta,
    now: datetime | None = None,
    free_token_prefix: str = DEFAULT_FREE_TOKEN_PREFIX,
) -> AccessGrant:
    """
    Build the grant record for an unlock. Does not persist anything.

    Args:
        item_id: Unlocked item
        payment_token: Gateway token or free-access token
        amount: Amount paid in whole currency units
        duration: Access window length
        now: Access start (defaults to current UTC time)
        free_token_prefix: Reserved prefix of free-access tokens
    """
    start = now or datetime.now(UTC)
    return AccessGrant(
        item_id=item_id,
        payment_token=payment_token,
        amount_paid=amount,
        access_start=start,
        access_expiry=start + duration,
        is_free=is_free_access_token(payment_token, free_token_prefix),
    )


class AccessGrantNotifier:
    """
    Invokes the caller's success callback exactly once per granting outcome.

    Failure and dismissal outcomes are ignored. If the callback raises, the
    error propagates and the outcome is not marked as notified.
    """

    def __init__(self, on_success: GrantCallback) -> None:
        self._on_success = on_success
        self._notified: set[str] = set()

    async def notify(self, outcome: PaymentOutcome) -> bool:
        """
        Fire the callback for a Success / FreeAccess outcome.

        Returns:
            True if the callback ran, False if the outcome does not grant
            access or its token was already notified.
        """
        if not isinstance(outcome, (PaymentSuccess, FreeAccess)):
            return False

        token = outcome.payment_token
        amount = outcome.amount
        if token in self._notified:
            logger.warning("Grant for token %s already notified; skipping", token)
            return False

        self._notified.add(token)
        logger.info("Access granted: token=%s amount=%s", token, amount)

        try:
            result = self._on_success(token, amount)
            if inspect.isawaitable(result):
                await result
        except Exception:
            # Forgotten so the same outcome can be notified again
            self._notified.discard(token)
            raise
        return True

"""
PaymentOutcome tagged variant.

Exactly one of these is produced per checkout attempt.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(Enum):
    """Why a checkout attempt failed."""

    INVALID_REQUEST = "invalid_request"
    GATEWAY_ERROR = "gateway_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"
    VERIFICATION_FAILED = "verification_failed"


@dataclass(frozen=True)
class PaymentSuccess:
    """Gateway confirmed payment with a usable token."""

    payment_token: str
    amount: int


@dataclass(frozen=True)
class FreeAccess:
    """Zero amount due; unlocked without contacting the gateway."""

    payment_token: str
    amount: int = 0


@dataclass(frozen=True)
class PaymentFailure:
    """Gateway reported a failure, or its success payload was unusable."""

    kind: FailureKind
    message: str
    provider_code: str | None = None

    @property
    def is_blocking(self) -> bool:
        """Money may have moved without a grant; user must contact support."""
        return self.kind is FailureKind.VERIFICATION_FAILED


@dataclass(frozen=True)
class PaymentDismissed:
    """User closed the gateway widget. Not an error."""

    pass


PaymentOutcome = PaymentSuccess | FreeAccess | PaymentFailure | PaymentDismissed
GrantingOutcome = PaymentSuccess | FreeAccess


def grants_access(outcome: PaymentOutcome) -> bool:
    """True for the outcomes that unlock the item."""
    return isinstance(outcome, (PaymentSuccess, FreeAccess))

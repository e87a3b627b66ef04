"""
Outcome classification models.
"""

from __future__ import annotations

from dataclasses import dataclass

from paid_access.domain.outcomes import FailureKind


@dataclass(frozen=True)
class FailureClassification:
    """Domain kind and user-facing message for a gateway failure."""

    kind: FailureKind
    message: str


# Provider error code -> (kind, fixed message)
KNOWN_FAILURES: dict[str, FailureClassification] = {
    "BAD_REQUEST_ERROR": FailureClassification(
        FailureKind.INVALID_REQUEST,
        "Invalid payment details. Please check and try again.",
    ),
    "GATEWAY_ERROR": FailureClassification(
        FailureKind.GATEWAY_ERROR,
        "Payment gateway error. Please try again or use a different payment method.",
    ),
    "NETWORK_ERROR": FailureClassification(
        FailureKind.NETWORK_ERROR,
        "Network error. Please check your internet connection and try again.",
    ),
}

GENERIC_FAILURE_MESSAGE = "Payment failed. Please try again."
VERIFICATION_FAILED_MESSAGE = (
    "Payment verification failed. Please contact support if amount was deducted."
)

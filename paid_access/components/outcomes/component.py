"""
Outcome classification component.

Pure mapping from gateway failure payloads to FailureKind + message.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from paid_access.domain.outcomes import FailureKind

from .models import GENERIC_FAILURE_MESSAGE, KNOWN_FAILURES, FailureClassification


def classify_failure(
    provider_code: str | None,
    provider_description: str | None = None,
) -> FailureClassification:
    """
    Classify a gateway failure.

    Known codes map to fixed messages. Anything else is UNKNOWN, using the
    provider's description when it has one, else a generic message.
    """
    if provider_code is not None and provider_code in KNOWN_FAILURES:
        return KNOWN_FAILURES[provider_code]

    if provider_description and provider_description.strip():
        return FailureClassification(FailureKind.UNKNOWN, provider_description)

    return FailureClassification(FailureKind.UNKNOWN, GENERIC_FAILURE_MESSAGE)


def decode_failure_payload(payload: Any) -> tuple[str | None, str | None]:
    """
    Extract (code, description) from a `{"error": {...}}` failure payload.

    Malformed payloads decode to (None, None).
    """
    if not isinstance(payload, Mapping):
        return None, None

    error = payload.get("error")
    if not isinstance(error, Mapping):
        return None, None

    code = error.get("code")
    description = error.get("description")
    return (
        code if isinstance(code, str) else None,
        description if isinstance(description, str) else None,
    )

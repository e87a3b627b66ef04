"""
Outcomes component - gateway failure classification.
"""

from .component import classify_failure, decode_failure_payload
from .models import (
    GENERIC_FAILURE_MESSAGE,
    KNOWN_FAILURES,
    VERIFICATION_FAILED_MESSAGE,
    FailureClassification,
)

__all__ = [
    "classify_failure",
    "decode_failure_payload",
    "FailureClassification",
    "KNOWN_FAILURES",
    "GENERIC_FAILURE_MESSAGE",
    "VERIFICATION_FAILED_MESSAGE",
]

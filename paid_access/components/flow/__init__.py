"""
Payment flow component - one payment modal lifecycle.
"""

from .component import PaymentFlow
from .factory import create_payment_flow
from .models import PayOutput, PromoOutput, describe_duration

__all__ = [
    "PaymentFlow",
    "create_payment_flow",
    "PayOutput",
    "PromoOutput",
    "describe_duration",
]

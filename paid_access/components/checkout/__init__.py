"""
Checkout component - gateway loading and checkout session lifecycle.
"""

from ._session import CheckoutSession, decode_success_payload
from .component import INIT_FAILED_MESSAGE, CheckoutOrchestrator
from .loader import GatewayLoader
from .models import (
    CheckoutConfig,
    CheckoutMetadata,
    CheckoutState,
    LoaderState,
    SessionHandlers,
    SessionOptions,
)
from .ports import GatewayPort

__all__ = [
    # Orchestration
    "CheckoutOrchestrator",
    "GatewayLoader",
    "CheckoutSession",
    "decode_success_payload",
    "INIT_FAILED_MESSAGE",
    # Models
    "CheckoutConfig",
    "CheckoutMetadata",
    "CheckoutState",
    "LoaderState",
    "SessionHandlers",
    "SessionOptions",
    # Ports
    "GatewayPort",
]

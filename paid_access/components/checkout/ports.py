"""
Checkout component ports.
"""

from __future__ import annotations

from typing import Protocol

from .models import SessionHandlers, SessionOptions


class GatewayPort(Protocol):
    """
    Hosted checkout gateway.

    Implementations:
    - StubGateway: in-memory gateway for dev and tests
    """

    def is_runtime_loaded(self) -> bool:
        """True once the gateway's client runtime is available."""
        ...

    async def load_runtime(self) -> None:
        """Load the client runtime. Raises if it cannot be loaded."""
        ...

    def open_session(self, options: SessionOptions, handlers: SessionHandlers) -> None:
        """
        Open the hosted checkout UI.

        Returns immediately; the gateway later calls exactly one of the
        handlers (success payload, failure payload, or dismissal).
        """
        ...

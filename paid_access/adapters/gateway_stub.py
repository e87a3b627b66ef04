"""
Stub gateway adapter (dev/tests).

In-memory implementation of GatewayPort. Sessions stay open until a test
or dev harness completes, fails, or dismisses them.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from paid_access.components.checkout import GatewayPort, SessionHandlers, SessionOptions

logger = logging.getLogger(__name__)


@dataclass
class OpenedSession:
    """Record of a session the stub opened, for test assertions."""

    options: SessionOptions
    handlers: SessionHandlers


@dataclass
class StubGateway:
    """
    Stub gateway for dev and tests.

    Configure `fail_load` to make runtime loading fail, or `hold_load` to
    keep loads pending until `release_load()` is called.
    """

    fail_load: bool = False
    hold_load: bool = False
    fail_open: bool = False
    token_field: str = "payment_token"
    token_prefix: str = "pay_"

    load_calls: int = 0
    sessions: list[OpenedSession] = field(default_factory=list)
    _loaded: bool = False
    _release: asyncio.Event | None = None

    def is_runtime_loaded(self) -> bool:
        return self._loaded

    async def load_runtime(self) -> None:
        self.load_calls += 1
        logger.debug("StubGateway.load_runtime: call %d", self.load_calls)

        if self.hold_load:
            if self._release is None:
                self._release = asyncio.Event()
            await self._release.wait()

        if self.fail_load:
            raise ConnectionError("Failed to load checkout runtime")
        self._loaded = True

    def open_session(self, options: SessionOptions, handlers: SessionHandlers) -> None:
        if self.fail_open:
            raise RuntimeError("Checkout widget failed to initialise")
        logger.debug(
            "StubGateway.open_session: amount=%s %s notes=%s",
            options.amount,
            options.currency,
            options.notes,
        )
        self.sessions.append(OpenedSession(options=options, handlers=handlers))

    # --- Testing Helpers ---

    def release_load(self) -> None:
        """Let held loads finish."""
        if self._release is None:
            self._release = asyncio.Event()
        self._release.set()

    @property
    def last_session(self) -> OpenedSession:
        if not self.sessions:
            raise LookupError("No session has been opened")
        return self.sessions[-1]

    def complete(self, payload: dict[str, Any] | None = None) -> bool:
        """Report success on the most recent session."""
        if payload is None:
            payload = {self.token_field: f"{self.token_prefix}{uuid4().hex[:14]}"}
        return self.last_session.handlers.on_success(payload)

    def fail(self, code: str | None, description: str | None = None) -> bool:
        """Report failure on the most recent session."""
        return self.last_session.handlers.on_failure(
            {"error": {"code": code, "description": description}}
        )

    def dismiss(self) -> bool:
        """Close the widget on the most recent session."""
        return self.last_session.handlers.on_dismiss()


# Verify protocol compliance at module load time
def _verify_protocol_compliance() -> None:
    gateway: GatewayPort = StubGateway()
    _ = gateway.is_runtime_loaded()


_verify_protocol_compliance()

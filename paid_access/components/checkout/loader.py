"""
GatewayLoader - idempotent loading of the gateway client runtime.

One loader per gateway runtime. Concurrent and repeated calls converge on a
single cached in-flight load; a failed load is forgotten so a later call
can retry.
"""

from __future__ import annotations

import asyncio
import logging

from paid_access.domain.errors import GatewayUnavailableError

from .models import LoaderState
from .ports import GatewayPort

logger = logging.getLogger(__name__)


class GatewayLoader:
    def __init__(self, gateway: GatewayPort) -> None:
        self._gateway = gateway
        self._load: asyncio.Future[None] | None = None
        self._state = LoaderState.IDLE
        self._last_error: GatewayUnavailableError | None = None
        self.load_attempts = 0

    @property
    def state(self) -> LoaderState:
        return self._state

    @property
    def last_error(self) -> GatewayUnavailableError | None:
        return self._last_error

    @property
    def is_ready(self) -> bool:
        return self._state is LoaderState.READY or self._gateway.is_runtime_loaded()

    async def ensure_ready(self) -> None:
        """
        Resolve once the runtime is loaded.

        Raises:
            GatewayUnavailableError: The load this call attached to failed
        """
        if self._gateway.is_runtime_loaded():
            self._state = LoaderState.READY
            return

        if self._load is None:
            self.load_attempts += 1
            logger.debug("Loading gateway runtime (attempt %d)", self.load_attempts)
            self._load = asyncio.ensure_future(self._gateway.load_runtime())
            self._state = LoaderState.LOADING

        load = self._load
        try:
            # Shielded so one cancelled waiter does not abort the shared load
            await asyncio.shield(load)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            error = GatewayUnavailableError(f"Payment system failed to load: {e}")
            if self._load is load:
                self._load = None
                self._state = LoaderState.NOT_READY
                self._last_error = error
                logger.error("Gateway runtime failed to load: %s", e)
            raise error from e

        if self._state is not LoaderState.READY:
            logger.info("Gateway runtime loaded")
        self._state = LoaderState.READY
        self._last_error = None

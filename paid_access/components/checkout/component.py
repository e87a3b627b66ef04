"""
Checkout component - CheckoutOrchestrator.

Owns the lifecycle of checkout attempts against a hosted gateway: ensures
the runtime is loaded, opens at most one session at a time, and resolves
every start_checkout call to exactly one PaymentOutcome.

Once a session is open it can only end through a gateway callback. If the
task awaiting start_checkout is cancelled, the session stays registered and
its outcome is still recorded and granted when the callback arrives.
"""

from __future__ import annotations

import asyncio
import logging

from paid_access.components.grants import AccessGrantNotifier, generate_free_access_token
from paid_access.domain.errors import (
    CheckoutBusyError,
    GatewayNotReadyError,
    GatewayUnavailableError,
    GrantNotificationError,
)
from paid_access.domain.outcomes import (
    FailureKind,
    FreeAccess,
    PaymentDismissed,
    PaymentFailure,
    PaymentOutcome,
    PaymentSuccess,
)

from ._session import CheckoutSession
from .loader import GatewayLoader
from .models import (
    CheckoutConfig,
    CheckoutMetadata,
    CheckoutState,
    LoaderState,
    SessionOptions,
)
from .ports import GatewayPort

logger = logging.getLogger(__name__)

INIT_FAILED_MESSAGE = "Failed to initialize payment. Please try again."


class CheckoutOrchestrator:
    """
    Runs checkout attempts for one modal.

    Args:
        gateway: Hosted checkout gateway
        loader: Shared runtime loader for `gateway`
        notifier: Fired once per Success / FreeAccess outcome
        config: Session configuration
    """

    def __init__(
        self,
        gateway: GatewayPort,
        loader: GatewayLoader,
        notifier: AccessGrantNotifier,
        config: CheckoutConfig | None = None,
    ) -> None:
        self._gateway = gateway
        self._loader = loader
        self._notifier = notifier
        self._config = config or CheckoutConfig()
        self._session: CheckoutSession | None = None
        self._state = CheckoutState.IDLE
        self._last_outcome: PaymentOutcome | None = None

    @property
    def state(self) -> CheckoutState:
        return self._state

    @property
    def last_outcome(self) -> PaymentOutcome | None:
        """Outcome of the most recent finished attempt."""
        return self._last_outcome

    @property
    def session_open(self) -> bool:
        return self._session is not None

    @property
    def session_id(self) -> str | None:
        return self._session.session_id if self._session else None

    async def ensure_gateway_ready(self) -> None:
        """
        Make sure the gateway runtime is loaded. Idempotent.

        Raises:
            GatewayUnavailableError: Runtime failed to load
        """
        if self._session is None:
            self._state = CheckoutState.LOADING
        try:
            await self._loader.ensure_ready()
        except GatewayUnavailableError:
            if self._session is None:
                self._state = CheckoutState.NOT_READY
            raise
        if self._session is None:
            self._state = CheckoutState.READY

    def build_session_options(self, amount: int, metadata: CheckoutMetadata) -> SessionOptions:
        config = self._config
        return SessionOptions(
            amount=amount * config.minor_unit_scale,
            currency=config.currency,
            name=config.merchant_name,
            description=config.description,
            notes=metadata.to_notes(),
            theme_color=config.theme_color,
            image=config.image,
            retry_enabled=config.retry_enabled,
            retry_max_count=config.retry_max_count,
            timeout_seconds=config.timeout_seconds,
        )

    async def start_checkout(self, amount: int, metadata: CheckoutMetadata) -> PaymentOutcome:
        """
        Run one checkout attempt to its single terminal outcome.

        A zero amount never contacts the gateway and resolves to FreeAccess.

        Raises:
            CheckoutBusyError: A session is already open (never queued)
            GatewayUnavailableError: Runtime failed to load
            GatewayNotReadyError: Runtime load has not completed
            GrantNotificationError: The outcome grants access but on_success
                raised; the outcome is on the error
            ValueError: Negative amount
        """
        if self._session is not None:
            raise CheckoutBusyError(self._session.session_id)
        if amount < 0:
            raise ValueError(f"amount must be non-negative, got {amount}")

        if amount == 0:
            return await self._grant_free_access()

        if not self._loader.is_ready:
            if self._loader.state is LoaderState.NOT_READY and self._loader.last_error:
                raise GatewayUnavailableError(self._loader.last_error.reason)
            raise GatewayNotReadyError()

        session = CheckoutSession(amount, self._config)
        self._session = session
        self._state = CheckoutState.SESSION_OPEN
        options = self.build_session_options(amount, metadata)
        logger.info(
            "Opening checkout session %s: item=%s amount=%s %s",
            session.session_id,
            metadata.item_id,
            amount,
            options.currency,
        )

        try:
            self._gateway.open_session(options, session.handlers())
        except Exception:
            logger.exception("Gateway failed to open session %s", session.session_id)
            session.resolve(PaymentFailure(kind=FailureKind.UNKNOWN, message=INIT_FAILED_MESSAGE))

        finisher = asyncio.ensure_future(self._finish_session(session))
        try:
            return await asyncio.shield(finisher)
        except asyncio.CancelledError:
            if not finisher.done():
                logger.warning(
                    "Caller stopped waiting on session %s; "
                    "it stays open until the gateway reports",
                    session.session_id,
                )
            finisher.add_done_callback(_log_detached_finish)
            raise

    async def _finish_session(self, session: CheckoutSession) -> PaymentOutcome:
        try:
            outcome = await session.wait()
        finally:
            session.close()
            self._session = None

        logger.info(
            "Checkout session %s resolved: %s", session.session_id, type(outcome).__name__
        )
        return await self._record(outcome)

    async def _grant_free_access(self) -> PaymentOutcome:
        outcome = FreeAccess(
            payment_token=generate_free_access_token(self._config.free_token_prefix)
        )
        logger.info("Zero amount due; granting free access without gateway")
        return await self._record(outcome)

    async def _record(self, outcome: PaymentOutcome) -> PaymentOutcome:
        """Store the outcome, return to idle, and notify if it grants access."""
        self._last_outcome = outcome
        logger.debug("Checkout %s -> idle", _terminal_state(outcome).value)
        self._state = CheckoutState.IDLE

        if isinstance(outcome, (PaymentSuccess, FreeAccess)):
            try:
                await self._notifier.notify(outcome)
            except Exception as e:
                raise GrantNotificationError(outcome) from e
        return outcome


def _terminal_state(outcome: PaymentOutcome) -> CheckoutState:
    if isinstance(outcome, (PaymentSuccess, FreeAccess)):
        return CheckoutState.COMPLETED
    if isinstance(outcome, PaymentDismissed):
        return CheckoutState.DISMISSED
    return CheckoutState.FAILED


def _log_detached_finish(finisher: asyncio.Future[PaymentOutcome]) -> None:
    if finisher.cancelled():
        return
    error = finisher.exception()
    if error is not None:
        logger.error("Detached checkout session failed: %s", error, exc_info=error)
        return
    logger.info("Detached checkout session resolved: %s", type(finisher.result()).__name__)

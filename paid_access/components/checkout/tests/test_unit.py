"""
Unit tests for the checkout component.

Tests:
- GatewayLoader converges concurrent loads on one in-flight load
- Load failure reports GatewayUnavailable and allows a later retry
- start_checkout opens one session with pass-through configuration
- Busy on concurrent start; zero amount bypasses the gateway
- Success / failure / dismiss callbacks resolve exactly one outcome
- Success payloads without a usable token are VERIFICATION_FAILED
"""

import asyncio
from collections.abc import Callable

import pytest

from paid_access.adapters.gateway_stub import StubGateway
from paid_access.components.checkout import (
    INIT_FAILED_MESSAGE,
    CheckoutConfig,
    CheckoutMetadata,
    CheckoutOrchestrator,
    CheckoutState,
    GatewayLoader,
    LoaderState,
    decode_success_payload,
)
from paid_access.components.grants import AccessGrantNotifier
from paid_access.components.outcomes import VERIFICATION_FAILED_MESSAGE
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
    PaymentSuccess,
)

METADATA = CheckoutMetadata(item_id="q-42", access_duration="1_hour", coupon_code="SAVE50")


class Grants:
    """Records on_success calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, int]] = []

    def __call__(self, payment_token: str, amount: int) -> None:
        self.calls.append((payment_token, amount))


@pytest.fixture
def config() -> CheckoutConfig:
    return CheckoutConfig(
        currency="INR",
        merchant_name="PrimoJobs",
        description="Premium Question Access - 1 Hour",
        retry_max_count=3,
        timeout_seconds=300,
        token_field="payment_token",
        token_prefix="pay_",
    )


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def grants() -> Grants:
    return Grants()


@pytest.fixture
def orchestrator(
    gateway: StubGateway, grants: Grants, config: CheckoutConfig
) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(
        gateway=gateway,
        loader=GatewayLoader(gateway),
        notifier=AccessGrantNotifier(grants),
        config=config,
    )


async def wait_for_session(gateway: StubGateway, count: int = 1) -> None:
    """Yield until the orchestrator has opened `count` sessions."""
    for _ in range(100):
        if len(gateway.sessions) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError("session was not opened")


async def settle(done: Callable[[], bool]) -> None:
    """Yield until `done()` holds."""
    for _ in range(100):
        if done():
            return
        await asyncio.sleep(0)
    raise AssertionError("condition never held")


# --- GatewayLoader ---


class TestGatewayLoader:
    @pytest.mark.asyncio
    async def test_loads_once(self, gateway: StubGateway) -> None:
        loader = GatewayLoader(gateway)

        await loader.ensure_ready()
        await loader.ensure_ready()

        assert gateway.load_calls == 1
        assert loader.state is LoaderState.READY
        assert loader.is_ready

    @pytest.mark.asyncio
    async def test_concurrent_calls_share_in_flight_load(self) -> None:
        gateway = StubGateway(hold_load=True)
        loader = GatewayLoader(gateway)

        waiters = [asyncio.ensure_future(loader.ensure_ready()) for _ in range(5)]
        await asyncio.sleep(0)
        assert loader.state is LoaderState.LOADING

        gateway.release_load()
        await asyncio.gather(*waiters)

        assert gateway.load_calls == 1
        assert loader.load_attempts == 1

    @pytest.mark.asyncio
    async def test_already_loaded_runtime_skips_load(self, gateway: StubGateway) -> None:
        await gateway.load_runtime()
        loader = GatewayLoader(gateway)

        await loader.ensure_ready()

        assert gateway.load_calls == 1
        assert loader.load_attempts == 0

    @pytest.mark.asyncio
    async def test_failure_reported_to_every_waiter(self) -> None:
        gateway = StubGateway(fail_load=True, hold_load=True)
        loader = GatewayLoader(gateway)

        first = asyncio.ensure_future(loader.ensure_ready())
        await asyncio.sleep(0)
        second = asyncio.ensure_future(loader.ensure_ready())
        await asyncio.sleep(0)
        assert gateway.load_calls == 1

        gateway.release_load()
        results = await asyncio.gather(first, second, return_exceptions=True)

        assert all(isinstance(r, GatewayUnavailableError) for r in results)
        assert gateway.load_calls == 1
        assert loader.state is LoaderState.NOT_READY

    @pytest.mark.asyncio
    async def test_retry_after_failure(self) -> None:
        gateway = StubGateway(fail_load=True)
        loader = GatewayLoader(gateway)

        with pytest.raises(GatewayUnavailableError):
            await loader.ensure_ready()

        gateway.fail_load = False
        await loader.ensure_ready()

        assert gateway.load_calls == 2
        assert loader.state is LoaderState.READY
        assert loader.last_error is None


# --- Session options ---


class TestSessionOptions:
    def test_build_session_options(self, orchestrator: CheckoutOrchestrator) -> None:
        options = orchestrator.build_session_options(25, METADATA)

        assert options.amount == 2500
        assert options.currency == "INR"
        assert options.name == "PrimoJobs"
        assert options.notes == {
            "item_id": "q-42",
            "access_duration": "1_hour",
            "coupon_applied": "SAVE50",
        }
        assert options.retry_max_count == 3
        assert options.timeout_seconds == 300

    def test_no_coupon_note(self, orchestrator: CheckoutOrchestrator) -> None:
        metadata = CheckoutMetadata(item_id="q-1", access_duration="1_hour")
        assert orchestrator.build_session_options(49, metadata).notes["coupon_applied"] == "none"

    def test_payload_shape(self, orchestrator: CheckoutOrchestrator) -> None:
        payload = orchestrator.build_session_options(49, METADATA).to_payload()
        assert payload["amount"] == 4900
        assert payload["retry"] == {"enabled": True, "max_count": 3}
        assert payload["theme"] == {"color": "#2563eb"}
        assert payload["timeout"] == 300


# --- start_checkout ---


class TestStartCheckout:
    @pytest.mark.asyncio
    async def test_success(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        assert orchestrator.state is CheckoutState.READY

        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)
        assert orchestrator.state is CheckoutState.SESSION_OPEN
        assert gateway.last_session.options.amount == 2500

        gateway.complete({"payment_token": "pay_29QQoUBi66xm2f"})
        outcome = await task

        assert outcome == PaymentSuccess(payment_token="pay_29QQoUBi66xm2f", amount=25)
        assert grants.calls == [("pay_29QQoUBi66xm2f", 25)]
        assert orchestrator.state is CheckoutState.IDLE
        assert orchestrator.last_outcome == outcome
        assert orchestrator.session_open is False

    @pytest.mark.asyncio
    async def test_second_start_is_busy(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        first = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)

        with pytest.raises(CheckoutBusyError):
            await orchestrator.start_checkout(25, METADATA)

        assert len(gateway.sessions) == 1
        gateway.dismiss()
        await first

    @pytest.mark.asyncio
    async def test_zero_amount_bypasses_gateway(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        outcome = await orchestrator.start_checkout(0, METADATA)

        assert isinstance(outcome, FreeAccess)
        assert outcome.amount == 0
        assert outcome.payment_token.startswith("free_access_")
        assert gateway.sessions == []
        assert gateway.load_calls == 0
        assert grants.calls == [(outcome.payment_token, 0)]

    @pytest.mark.asyncio
    async def test_not_ready_before_load(self, orchestrator: CheckoutOrchestrator) -> None:
        with pytest.raises(GatewayNotReadyError):
            await orchestrator.start_checkout(25, METADATA)

    @pytest.mark.asyncio
    async def test_unavailable_after_failed_load(self, grants: Grants) -> None:
        gateway = StubGateway(fail_load=True)
        orchestrator = CheckoutOrchestrator(
            gateway, GatewayLoader(gateway), AccessGrantNotifier(grants)
        )

        with pytest.raises(GatewayUnavailableError):
            await orchestrator.ensure_gateway_ready()
        assert orchestrator.state is CheckoutState.NOT_READY

        with pytest.raises(GatewayUnavailableError) as exc_info:
            await orchestrator.start_checkout(25, METADATA)
        assert not isinstance(exc_info.value, GatewayNotReadyError)
        assert gateway.sessions == []

    @pytest.mark.asyncio
    async def test_negative_amount(self, orchestrator: CheckoutOrchestrator) -> None:
        with pytest.raises(ValueError):
            await orchestrator.start_checkout(-1, METADATA)

    @pytest.mark.asyncio
    async def test_failure_classified(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)

        gateway.fail("NETWORK_ERROR", "Network request failed")
        outcome = await task

        assert isinstance(outcome, PaymentFailure)
        assert outcome.kind is FailureKind.NETWORK_ERROR
        assert outcome.provider_code == "NETWORK_ERROR"
        assert grants.calls == []
        assert orchestrator.state is CheckoutState.IDLE
        assert orchestrator.last_outcome is outcome

    @pytest.mark.asyncio
    async def test_dismiss(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)

        gateway.dismiss()
        outcome = await task

        assert outcome == PaymentDismissed()
        assert grants.calls == []
        assert orchestrator.state is CheckoutState.IDLE
        assert orchestrator.last_outcome == PaymentDismissed()

    @pytest.mark.asyncio
    async def test_retry_after_dismiss_opens_new_session(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        first = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)
        gateway.dismiss()
        await first

        second = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway, count=2)
        gateway.complete()
        outcome = await second

        assert isinstance(outcome, PaymentSuccess)
        assert len(gateway.sessions) == 2

    @pytest.mark.asyncio
    async def test_only_first_callback_counts(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)

        assert gateway.fail("GATEWAY_ERROR") is True
        assert gateway.complete() is False
        assert gateway.dismiss() is False
        outcome = await task

        assert isinstance(outcome, PaymentFailure)
        assert grants.calls == []

    @pytest.mark.asyncio
    async def test_late_callback_after_teardown_ignored(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)
        gateway.dismiss()
        await task

        assert gateway.complete() is False
        assert grants.calls == []

    @pytest.mark.asyncio
    async def test_open_error_becomes_failure(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        gateway.fail_open = True

        outcome = await orchestrator.start_checkout(25, METADATA)

        assert outcome == PaymentFailure(kind=FailureKind.UNKNOWN, message=INIT_FAILED_MESSAGE)
        assert orchestrator.session_open is False

    @pytest.mark.asyncio
    async def test_missing_token_is_verification_failure(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)

        gateway.complete({"order_id": "order_1"})
        outcome = await task

        assert isinstance(outcome, PaymentFailure)
        assert outcome.kind is FailureKind.VERIFICATION_FAILED
        assert outcome.is_blocking
        assert grants.calls == []
        assert orchestrator.state is CheckoutState.IDLE
        assert orchestrator.last_outcome is outcome


    @pytest.mark.asyncio
    async def test_cancelled_caller_keeps_session_open(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert orchestrator.session_open is True
        with pytest.raises(CheckoutBusyError):
            await orchestrator.start_checkout(25, METADATA)

        assert gateway.complete({"payment_token": "pay_after_cancel"}) is True
        await settle(lambda: not orchestrator.session_open)

        assert grants.calls == [("pay_after_cancel", 25)]
        assert orchestrator.last_outcome == PaymentSuccess("pay_after_cancel", 25)
        assert orchestrator.state is CheckoutState.IDLE

    @pytest.mark.asyncio
    async def test_cancelled_caller_then_dismiss_frees_orchestrator(
        self, orchestrator: CheckoutOrchestrator, gateway: StubGateway, grants: Grants
    ) -> None:
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        gateway.dismiss()
        await settle(lambda: not orchestrator.session_open)

        assert grants.calls == []
        retry = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway, count=2)
        gateway.complete()
        assert isinstance(await retry, PaymentSuccess)

    @pytest.mark.asyncio
    async def test_failing_grant_callback_keeps_outcome(
        self, gateway: StubGateway, config: CheckoutConfig
    ) -> None:
        def on_success(payment_token: str, amount: int) -> None:
            raise RuntimeError("storage down")

        orchestrator = CheckoutOrchestrator(
            gateway, GatewayLoader(gateway), AccessGrantNotifier(on_success), config
        )
        await orchestrator.ensure_gateway_ready()
        task = asyncio.ensure_future(orchestrator.start_checkout(25, METADATA))
        await wait_for_session(gateway)
        gateway.complete({"payment_token": "pay_abc"})

        with pytest.raises(GrantNotificationError) as exc_info:
            await task

        assert exc_info.value.outcome == PaymentSuccess("pay_abc", 25)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert orchestrator.last_outcome == PaymentSuccess("pay_abc", 25)
        assert orchestrator.session_open is False

    @pytest.mark.asyncio
    async def test_failing_grant_callback_on_free_access(
        self, gateway: StubGateway, config: CheckoutConfig
    ) -> None:
        def on_success(payment_token: str, amount: int) -> None:
            raise RuntimeError("storage down")

        orchestrator = CheckoutOrchestrator(
            gateway, GatewayLoader(gateway), AccessGrantNotifier(on_success), config
        )

        with pytest.raises(GrantNotificationError) as exc_info:
            await orchestrator.start_checkout(0, METADATA)

        assert isinstance(exc_info.value.outcome, FreeAccess)
        assert orchestrator.state is CheckoutState.IDLE


# --- Success payload decoding ---


class TestDecodeSuccessPayload:
    @pytest.mark.parametrize(
        "payload",
        [
            None,
            "pay_123",
            {},
            {"payment_token": ""},
            {"payment_token": "   "},
            {"payment_token": 12345},
            {"payment_token": "order_123"},
            {"payment_token": "free_access_123"},
        ],
    )
    def test_rejected(self, payload: object, config: CheckoutConfig) -> None:
        outcome = decode_success_payload(payload, 25, config)
        assert outcome == PaymentFailure(
            kind=FailureKind.VERIFICATION_FAILED, message=VERIFICATION_FAILED_MESSAGE
        )

    def test_accepted(self, config: CheckoutConfig) -> None:
        outcome = decode_success_payload({"payment_token": "pay_1", "extra": 1}, 25, config)
        assert outcome == PaymentSuccess(payment_token="pay_1", amount=25)

    def test_prefix_optional(self) -> None:
        config = CheckoutConfig(token_field="id", token_prefix=None)
        assert isinstance(decode_success_payload({"id": "anything"}, 5, config), PaymentSuccess)

    def test_free_prefix_rejected_even_without_token_prefix(self) -> None:
        config = CheckoutConfig(token_field="id", token_prefix=None)
        outcome = decode_success_payload({"id": "free_access_x"}, 5, config)
        assert isinstance(outcome, PaymentFailure)

"""
Wiring for a PaymentFlow.
"""

from __future__ import annotations

from collections.abc import Callable

from paid_access.components.checkout import (
    CheckoutConfig,
    CheckoutOrchestrator,
    GatewayLoader,
    GatewayPort,
)
from paid_access.components.grants import AccessGrantNotifier, GrantCallback
from paid_access.components.settings import SettingsProviderPort
from paid_access.rules.models import Rules

from .component import PaymentFlow


def create_payment_flow(
    gateway: GatewayPort,
    loader: GatewayLoader,
    settings_provider: SettingsProviderPort,
    rules: Rules,
    on_success: GrantCallback,
    on_close: Callable[[], None] | None = None,
) -> PaymentFlow:
    """
    Build a PaymentFlow for one modal.

    `loader` should be shared by every flow using `gateway` so the runtime
    is only ever loaded once.
    """
    orchestrator = CheckoutOrchestrator(
        gateway=gateway,
        loader=loader,
        notifier=AccessGrantNotifier(on_success),
        config=CheckoutConfig.from_rules(rules),
    )
    return PaymentFlow(
        orchestrator=orchestrator,
        settings_provider=settings_provider,
        rules=rules,
        on_close=on_close,
    )

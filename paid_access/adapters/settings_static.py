"""
Settings provider adapters.

StaticSettingsProvider serves a fixed row (or error) for dev and tests.
RulesSettingsProvider serves the rules file's defaults as if no row had
been saved, so the seed coupons apply.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from paid_access.components.settings import SettingsProviderPort
from paid_access.domain.entities import PaymentSettings

logger = logging.getLogger(__name__)


@dataclass
class StaticSettingsProvider:
    """Returns `row` after `delay_seconds`, or raises `error` if set."""

    row: PaymentSettings | Mapping[str, Any] | None = None
    error: Exception | None = None
    delay_seconds: float = 0.0
    fetch_calls: int = 0

    async def fetch_payment_settings(self) -> PaymentSettings | Mapping[str, Any] | None:
        self.fetch_calls += 1
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.row


class RulesSettingsProvider:
    """No stored settings; the settings component seeds from rules."""

    async def fetch_payment_settings(self) -> PaymentSettings | Mapping[str, Any] | None:
        logger.debug("RulesSettingsProvider: no stored settings")
        return None


def _verify_protocol_compliance() -> None:
    _static: SettingsProviderPort = StaticSettingsProvider()
    _rules: SettingsProviderPort = RulesSettingsProvider()


_verify_protocol_compliance()

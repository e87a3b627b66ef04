"""
Settings component.

Loads the PaymentSettings snapshot for one modal lifecycle. Never blocks
the user: any failure falls back to the default base price with no
coupons.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping

from pydantic import ValidationError

from paid_access.domain.entities import Coupon, PaymentSettings
from paid_access.domain.errors import ConfigError
from paid_access.rules.models import Rules

from .models import LoadSettingsOutput
from .ports import SettingsProviderPort

logger = logging.getLogger(__name__)


def get_fallback_settings(rules: Rules) -> PaymentSettings:
    """Default price and currency, no coupons."""
    return PaymentSettings(
        base_price=rules.pricing.default_base_price,
        currency=rules.pricing.currency,
        active_coupons=(),
    )


def get_seeded_settings(rules: Rules) -> PaymentSettings:
    """Defaults plus the seed coupons from the rules file."""
    return PaymentSettings(
        base_price=rules.pricing.default_base_price,
        currency=rules.pricing.currency,
        active_coupons=tuple(
            Coupon(code=c.code, discount_percent=c.discount, description=c.description)
            for c in rules.coupons.defaults
        ),
    )


def parse_settings(raw: PaymentSettings | Mapping[str, object]) -> PaymentSettings:
    """
    Validate a provider row into PaymentSettings.

    Raises:
        ConfigError: Row does not match the settings schema
    """
    if isinstance(raw, PaymentSettings):
        return raw
    try:
        return PaymentSettings.model_validate(dict(raw))
    except (ValidationError, TypeError, ValueError) as e:
        raise ConfigError(f"invalid settings row: {e}") from e


async def load_payment_settings(
    provider: SettingsProviderPort,
    rules: Rules,
) -> LoadSettingsOutput:
    """
    Fetch settings with the configured timeout.

    Returns:
        LoadSettingsOutput; `error` is set when the fallback was used.
    """
    timeout = rules.settings_provider.fetch_timeout_seconds

    try:
        raw = await asyncio.wait_for(provider.fetch_payment_settings(), timeout=timeout)
        if raw is None:
            logger.info("No payment settings saved; using seeded defaults")
            return LoadSettingsOutput(settings=get_seeded_settings(rules), source="seeded")
        settings = parse_settings(raw)
    except TimeoutError:
        error = ConfigError(f"settings fetch timed out after {timeout}s")
    except ConfigError as e:
        error = e
    except Exception as e:
        # Provider/storage failure of any kind is non-fatal here
        error = ConfigError(str(e) or type(e).__name__)
    else:
        return LoadSettingsOutput(settings=settings, source="provider")

    logger.warning("Falling back to default payment settings: %s", error.reason)
    return LoadSettingsOutput(
        settings=get_fallback_settings(rules),
        source="fallback",
        error=error,
    )

"""
Settings component ports.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from paid_access.domain.entities import PaymentSettings


class SettingsProviderPort(Protocol):
    """External source of payment settings."""

    async def fetch_payment_settings(self) -> PaymentSettings | Mapping[str, Any] | None:
        """
        Fetch the current settings.

        Returns:
            Settings (typed or as a raw row), or None when no settings
            have been saved yet. Raises on storage errors.
        """
        ...

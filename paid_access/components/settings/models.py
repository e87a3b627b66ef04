"""
Settings component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from paid_access.domain.entities import PaymentSettings
from paid_access.domain.errors import ConfigError

# provider: fetched row; seeded: no row yet, rules defaults incl. seed
# coupons; fallback: fetch failed, default price and no coupons
SettingsSource = Literal["provider", "seeded", "fallback"]


@dataclass(frozen=True)
class LoadSettingsOutput:
    """Settings snapshot plus where it came from."""

    settings: PaymentSettings
    source: SettingsSource
    error: ConfigError | None = None

    @property
    def used_fallback(self) -> bool:
        return self.source == "fallback"

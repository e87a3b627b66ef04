"""
Grants component models.

AccessGrant mirrors the record the caller persists after an unlock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

DEFAULT_FREE_TOKEN_PREFIX = "free_access_"


@dataclass(frozen=True)
class AccessGrant:
    """Timed access to one item, started by a successful or free outcome."""

    item_id: str
    payment_token: str
    amount_paid: int
    access_start: datetime
    access_expiry: datetime
    is_free: bool

    def is_active(self, now: datetime) -> bool:
        return self.access_start <= now < self.access_expiry

    def remaining(self, now: datetime) -> timedelta:
        """Time left on the countdown, never negative."""
        return max(timedelta(0), self.access_expiry - now)

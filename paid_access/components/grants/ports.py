"""
Grants component ports.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Protocol


class GrantCallback(Protocol):
    """
    Caller hook fired once per successful or free unlock.

    The caller persists the grant and starts the access countdown.
    May be a plain function or a coroutine function.
    """

    def __call__(self, payment_token: str, amount: int) -> Awaitable[None] | None: ...

"""
Checkout component models.

State machine:
    idle -> loading -> ready -> session_open -> {completed | failed | dismissed} -> idle
    loading -> not_ready (runtime failed to load; a later call may retry)

The terminal states are passed through as an outcome is recorded; the
orchestrator then rests in idle and exposes the outcome as last_outcome.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from paid_access.rules.models import Rules


class CheckoutState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    NOT_READY = "not_ready"
    SESSION_OPEN = "session_open"
    COMPLETED = "completed"
    FAILED = "failed"
    DISMISSED = "dismissed"


class LoaderState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    NOT_READY = "not_ready"


@dataclass(frozen=True)
class CheckoutConfig:
    """Pass-through session configuration, sourced from the rules file."""

    currency: str = "INR"
    minor_unit_scale: int = 100
    merchant_name: str = "Paid Access"
    description: str = "Premium Access"
    image: str | None = None
    theme_color: str = "#2563eb"
    retry_enabled: bool = True
    retry_max_count: int = 3
    timeout_seconds: int = 300
    token_field: str = "payment_token"
    token_prefix: str | None = None
    free_token_prefix: str = "free_access_"

    @classmethod
    def from_rules(cls, rules: Rules) -> CheckoutConfig:
        gateway = rules.gateway
        return cls(
            currency=rules.pricing.currency,
            minor_unit_scale=rules.pricing.minor_unit_scale,
            merchant_name=gateway.merchant_name,
            description=gateway.description,
            image=gateway.image,
            theme_color=gateway.theme_color,
            retry_enabled=gateway.retry_enabled,
            retry_max_count=gateway.retry_max_count,
            timeout_seconds=gateway.timeout_seconds,
            token_field=gateway.token_field,
            token_prefix=gateway.token_prefix,
            free_token_prefix=rules.access.free_token_prefix,
        )


@dataclass(frozen=True)
class CheckoutMetadata:
    """Free-form notes attached to the gateway session."""

    item_id: str
    access_duration: str
    coupon_code: str | None = None

    def to_notes(self) -> dict[str, str]:
        return {
            "item_id": self.item_id,
            "access_duration": self.access_duration,
            "coupon_applied": self.coupon_code or "none",
        }


@dataclass(frozen=True)
class SessionOptions:
    """Everything the gateway needs to open one checkout session."""

    amount: int  # minor units
    currency: str
    name: str
    description: str
    notes: dict[str, str] = field(default_factory=dict)
    theme_color: str = "#2563eb"
    image: str | None = None
    retry_enabled: bool = True
    retry_max_count: int = 3
    timeout_seconds: int = 300

    def to_payload(self) -> dict[str, Any]:
        """Options in the hosted widget's wire shape."""
        payload: dict[str, Any] = {
            "amount": self.amount,
            "currency": self.currency,
            "name": self.name,
            "description": self.description,
            "notes": dict(self.notes),
            "theme": {"color": self.theme_color},
            "retry": {"enabled": self.retry_enabled, "max_count": self.retry_max_count},
            "timeout": self.timeout_seconds,
            "remember_customer": False,
        }
        if self.image:
            payload["image"] = self.image
        return payload


@dataclass(frozen=True)
class SessionHandlers:
    """Callbacks the gateway invokes to end a session."""

    on_success: Callable[[Mapping[str, Any]], bool]
    on_failure: Callable[[Mapping[str, Any]], bool]
    on_dismiss: Callable[[], bool]

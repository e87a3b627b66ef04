"""Public checkout endpoints: active promo codes and price quotes."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from paid_access.api.deps import get_rules, get_settings_provider
from paid_access.components.coupons import ValidateCouponInput
from paid_access.components.coupons import run as run_validate_coupon
from paid_access.components.pricing import price_for, resolve_base_price
from paid_access.components.settings import SettingsProviderPort, load_payment_settings
from paid_access.rules.models import Rules

router = APIRouter()


class CouponResponse(BaseModel):
    code: str
    discount_percent: float
    description: str | None = None


class QuoteResponse(BaseModel):
    item_id: str
    currency: str
    base_price: float
    final_amount: int
    applied_coupon: str | None = None
    discount_percent: float = 0
    is_free: bool
    promo_error: str | None = None


@router.get("/coupons", response_model=list[CouponResponse])
async def list_coupons(
    rules: Rules = Depends(get_rules),
    provider: SettingsProviderPort = Depends(get_settings_provider),
) -> list[CouponResponse]:
    """Active promo codes, in configured order."""
    loaded = await load_payment_settings(provider, rules)
    return [
        CouponResponse(
            code=c.code,
            discount_percent=c.discount_percent,
            description=c.description,
        )
        for c in loaded.settings.active_coupons
    ]


@router.get("/quote", response_model=QuoteResponse)
async def get_quote(
    item_id: str = Query(..., min_length=1),
    price: float | None = Query(None, ge=0, allow_inf_nan=False),
    code: str | None = Query(None),
    rules: Rules = Depends(get_rules),
    provider: SettingsProviderPort = Depends(get_settings_provider),
) -> QuoteResponse:
    """
    Quote the amount due for an item.

    An invalid promo code is reported in `promo_error` and the quote falls
    back to the undiscounted price; it is not an HTTP error.
    """
    loaded = await load_payment_settings(provider, rules)
    pricing = price_for(resolve_base_price(loaded.settings, price))

    promo_error = None
    if code is not None:
        result = run_validate_coupon(
            ValidateCouponInput(raw_code=code, available=loaded.settings.active_coupons)
        )
        if result.coupon is not None:
            pricing = price_for(pricing.base_price, result.coupon)
        else:
            promo_error = result.message

    return QuoteResponse(
        item_id=item_id,
        currency=loaded.settings.currency,
        base_price=pricing.base_price,
        final_amount=pricing.final_amount,
        applied_coupon=pricing.applied_coupon.code if pricing.applied_coupon else None,
        discount_percent=pricing.discount_percent,
        is_free=pricing.is_free,
        promo_error=promo_error,
    )

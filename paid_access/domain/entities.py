"""
Core domain entities.

Coupons and payment settings arrive from an external settings store; they
are validated here and immutable afterwards.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

# --- Coupons ---


class Coupon(BaseModel):
    """Promo code and the percentage it takes off the base price."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str = Field(min_length=1)
    discount_percent: float = Field(
        ge=0,
        le=100,
        allow_inf_nan=False,
        validation_alias=AliasChoices("discount_percent", "discount", "discountPercent"),
    )
    description: str | None = None


# --- Settings ---


class PaymentSettings(BaseModel):
    """
    Snapshot of payment settings for one modal lifecycle.

    Accepts the settings store's snake_case columns as well as the
    camelCase keys older clients wrote.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_price: float = Field(
        ge=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("base_price", "basePrice"),
    )
    currency: str = Field(min_length=1)
    active_coupons: tuple[Coupon, ...] = Field(
        default=(),
        validation_alias=AliasChoices("active_coupons", "activeCoupons"),
    )

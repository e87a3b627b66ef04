from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class PricingRules(BaseModel):
    default_base_price: float = Field(default=49, ge=0, allow_inf_nan=False)
    currency: str = "INR"
    minor_unit_scale: int = Field(default=100, gt=0)


class SeedCoupon(BaseModel):
    code: str = Field(min_length=1)
    discount: float = Field(ge=0, le=100, allow_inf_nan=False)
    description: str | None = None


class CouponsRules(BaseModel):
    defaults: list[SeedCoupon] = Field(default_factory=list)


class GatewayRules(BaseModel):
    merchant_name: str = "Paid Access"
    description: str = "Premium Access"
    image: str | None = None
    theme_color: str = "#2563eb"
    retry_enabled: bool = True
    retry_max_count: int = Field(default=3, ge=0)
    timeout_seconds: int = Field(default=300, gt=0)
    token_field: str = "payment_token"
    token_prefix: str | None = None  # e.g. "pay_"


class AccessRules(BaseModel):
    duration_minutes: int = Field(default=60, gt=0)
    duration_tag: str = "1_hour"
    free_token_prefix: str = Field(default="free_access_", min_length=1)


class SettingsProviderRules(BaseModel):
    fetch_timeout_seconds: float = Field(default=3.0, gt=0, allow_inf_nan=False)


class Rules(BaseModel):
    project: ProjectRules
    pricing: PricingRules = Field(default_factory=PricingRules)
    coupons: CouponsRules = Field(default_factory=CouponsRules)
    gateway: GatewayRules = Field(default_factory=GatewayRules)
    access: AccessRules = Field(default_factory=AccessRules)
    settings_provider: SettingsProviderRules = Field(default_factory=SettingsProviderRules)

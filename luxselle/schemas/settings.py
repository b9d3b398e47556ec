from typing import Optional

from pydantic import Field, field_validator

from luxselle.schemas.base import ApiModel, reject_null


class OrgSettingsRead(ApiModel):
    """Effective settings: the stored record, or env defaults when none exists."""
    organisation_id: str
    base_currency: str = "EUR"
    target_margin_pct: float
    low_stock_threshold: int
    fx_usd_to_eur: float
    vat_rate_pct: float
    receive_sell_markup: float


class OrgSettingsUpdate(ApiModel):
    target_margin_pct: Optional[float] = Field(default=None, ge=0, lt=100)
    low_stock_threshold: Optional[int] = Field(default=None, ge=0)
    fx_usd_to_eur: Optional[float] = Field(default=None, gt=0)
    vat_rate_pct: Optional[float] = Field(default=None, ge=0, le=100)
    receive_sell_markup: Optional[float] = Field(default=None, gt=0)

    @field_validator('*', mode='before')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)

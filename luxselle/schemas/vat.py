from typing import Optional

from pydantic import Field

from luxselle.schemas.base import ApiModel


class VatCalculateRequest(ApiModel):
    amount_eur: float = Field(ge=0)
    incl_vat: bool
    # Falls back to the organisation's VAT rate when omitted
    rate_pct: Optional[float] = Field(default=None, ge=0, le=100)


class VatCalculation(ApiModel):
    net_eur: float
    vat_eur: float
    gross_eur: float
    rate_pct: float

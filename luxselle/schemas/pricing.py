from typing import List, Optional

from pydantic import Field

from luxselle.schemas.base import ApiModel


class PricingAnalyseRequest(ApiModel):
    brand: str = Field(min_length=1)
    model: str = Field(min_length=1)
    category: str = ""
    condition: str = ""
    colour: str = ""
    notes: str = ""
    ask_price_eur: Optional[float] = Field(default=None, ge=0)


class PricingComparable(ApiModel):
    title: str
    price_eur: float
    source: str
    source_url: Optional[str] = None


class PricingEstimate(ApiModel):
    """Raw estimate returned by a pricing provider."""
    estimated_retail_eur: float
    confidence: float
    comps: List[PricingComparable] = Field(default_factory=list)


class PricingAnalysis(ApiModel):
    evaluation_id: str
    brand: str
    model: str
    estimated_retail_eur: float
    max_buy_price_eur: float
    history_avg_paid_eur: Optional[float] = None
    comps: List[PricingComparable]
    confidence: float
    provider: str
    target_margin_pct: float

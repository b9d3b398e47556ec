"""
Schemas for buying list endpoints, including the receive response.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import Field, field_validator

from luxselle.core.enums import BuyingListSource, BuyingListStatus
from luxselle.schemas.base import ApiModel, DocumentRead, reject_null
from luxselle.schemas.product import ProductRead


class BuyingListItemBase(ApiModel):
    source_type: BuyingListSource = BuyingListSource.MANUAL
    supplier_id: Optional[str] = None
    supplier_item_id: Optional[str] = None
    evaluation_id: Optional[str] = None
    brand: str = Field(min_length=1)
    model: str = Field(min_length=1)
    category: str = ""
    condition: str = ""
    colour: str = ""
    target_buy_price_eur: float = Field(ge=0)
    status: BuyingListStatus = BuyingListStatus.PENDING
    notes: str = ""
    landed_cost_snapshot: Optional[Dict[str, Any]] = None


class BuyingListItemCreate(BuyingListItemBase):
    pass


class BuyingListItemUpdate(ApiModel):
    brand: Optional[str] = Field(default=None, min_length=1)
    model: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    condition: Optional[str] = None
    colour: Optional[str] = None
    target_buy_price_eur: Optional[float] = Field(default=None, ge=0)
    # received is reachable only through the receive operation
    status: Optional[Literal["pending", "ordered", "cancelled"]] = None
    notes: Optional[str] = None
    landed_cost_snapshot: Optional[Dict[str, Any]] = None

    @field_validator(
        'brand', 'model', 'category', 'condition', 'colour', 'target_buy_price_eur', 'status', 'notes',
        mode='before',
    )
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class BuyingListItemRead(BuyingListItemBase, DocumentRead):
    pass


class ReceiveResult(ApiModel):
    buying_list_item: BuyingListItemRead
    product: ProductRead

from typing import List, Optional

from pydantic import Field, field_validator

from luxselle.core.enums import SourcingPriority, SourcingStatus
from luxselle.schemas.base import ApiModel, DocumentRead, reject_null


class SourcingRequestBase(ApiModel):
    customer_name: str = Field(min_length=1)
    query_text: str = Field(min_length=1)
    brand: str = ""
    budget: float = Field(ge=0)
    priority: SourcingPriority = SourcingPriority.MEDIUM
    status: SourcingStatus = SourcingStatus.OPEN
    notes: str = ""
    linked_product_id: Optional[str] = None
    linked_supplier_item_id: Optional[str] = None


class SourcingRequestCreate(SourcingRequestBase):
    pass


class SourcingRequestUpdate(ApiModel):
    customer_name: Optional[str] = Field(default=None, min_length=1)
    query_text: Optional[str] = Field(default=None, min_length=1)
    brand: Optional[str] = None
    budget: Optional[float] = Field(default=None, ge=0)
    priority: Optional[SourcingPriority] = None
    status: Optional[SourcingStatus] = None
    notes: Optional[str] = None
    linked_product_id: Optional[str] = None
    linked_supplier_item_id: Optional[str] = None

    @field_validator('customer_name', 'query_text', 'brand', 'budget', 'priority', 'status', 'notes', mode='before')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class SourcingRequestRead(SourcingRequestBase, DocumentRead):
    pass


class NextStatuses(ApiModel):
    current: SourcingStatus
    allowed: List[SourcingStatus]

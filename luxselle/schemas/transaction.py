from datetime import datetime
from typing import Any, Dict, Optional

from luxselle.core.enums import TransactionType
from luxselle.schemas.base import ApiModel, DocumentRead
from luxselle.schemas.product import ProductRead


class TransactionRead(DocumentRead):
    type: TransactionType
    product_id: Optional[str] = None
    buying_list_item_id: Optional[str] = None
    amount_eur: float
    occurred_at: datetime
    notes: str = ""


class ActivityEventRead(DocumentRead):
    actor: str
    event_type: str
    entity_type: str
    entity_id: str
    payload: Dict[str, Any] = {}


class ProductSaleResult(ApiModel):
    product: ProductRead
    transaction: TransactionRead

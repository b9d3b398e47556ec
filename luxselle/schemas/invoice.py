"""
Schemas for invoices. An invoice is created either from a single sale amount
(VAT-inclusive) or from explicit net line items.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from luxselle.schemas.base import ApiModel, DocumentRead


class InvoiceLineItem(ApiModel):
    description: str = Field(min_length=1)
    quantity: int = Field(default=1, ge=1)
    unit_price_eur: float = Field(ge=0)
    vat_pct: float = Field(ge=0, le=100)
    # Net line total, quantity x unit price unless given
    amount_eur: Optional[float] = Field(default=None, ge=0)


class InvoiceFromSale(ApiModel):
    from_sale: Literal[True]
    amount_eur: float = Field(ge=0)
    vat_pct: Optional[float] = Field(default=None, ge=0, le=100)
    transaction_id: Optional[str] = None
    product_id: Optional[str] = None
    customer_name: str = ""
    customer_email: Optional[str] = None
    description: str = "Sale"
    notes: str = ""


class InvoiceCreate(ApiModel):
    from_sale: bool = False
    invoice_number: Optional[str] = Field(default=None, min_length=1)
    customer_name: str = ""
    customer_email: Optional[str] = None
    line_items: List[InvoiceLineItem] = Field(min_length=1)
    notes: str = ""


class InvoiceRead(DocumentRead):
    invoice_number: str
    customer_name: str = ""
    customer_email: Optional[str] = None
    line_items: List[InvoiceLineItem]
    subtotal_eur: float
    vat_eur: float
    total_eur: float
    currency: str = "EUR"
    issued_at: datetime
    transaction_id: Optional[str] = None
    product_id: Optional[str] = None
    notes: str = ""

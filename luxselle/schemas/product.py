"""
Schemas for product endpoints.
"""

from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from luxselle.core.enums import ProductStatus
from luxselle.schemas.base import ApiModel, DocumentRead, reject_null


class ProductBase(ApiModel):
    brand: str = Field(min_length=1)
    model: str = Field(min_length=1)
    title: str = ""
    sku: str = ""
    category: str = ""
    condition: str = ""
    colour: str = ""
    cost_price_eur: float = Field(default=0.0, ge=0)
    sell_price_eur: float = Field(default=0.0, ge=0)
    customs_eur: float = Field(default=0.0, ge=0)
    vat_eur: float = Field(default=0.0, ge=0)
    status: ProductStatus = ProductStatus.IN_STOCK
    quantity: int = Field(default=1, ge=0)
    images: List[Dict[str, Any]] = Field(default_factory=list)
    image_urls: List[str] = Field(default_factory=list)
    notes: str = ""

    @field_validator('images', 'image_urls', mode='before')
    @classmethod
    def validate_lists(cls, v):
        if v is None:
            return []
        return v


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ApiModel):
    """Patch structure: only fields the caller sets are applied."""
    brand: Optional[str] = Field(default=None, min_length=1)
    model: Optional[str] = Field(default=None, min_length=1)
    title: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    condition: Optional[str] = None
    colour: Optional[str] = None
    cost_price_eur: Optional[float] = Field(default=None, ge=0)
    sell_price_eur: Optional[float] = Field(default=None, ge=0)
    customs_eur: Optional[float] = Field(default=None, ge=0)
    vat_eur: Optional[float] = Field(default=None, ge=0)
    status: Optional[ProductStatus] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    images: Optional[List[Dict[str, Any]]] = None
    image_urls: Optional[List[str]] = None
    notes: Optional[str] = None

    @field_validator('*', mode='before')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class ProductRead(ProductBase, DocumentRead):
    currency: str = "EUR"


class ProductSell(ApiModel):
    """Body for POST /products/{id}/sell; amount defaults to the sell price."""
    amount_eur: Optional[float] = Field(default=None, ge=0)
    quantity: int = Field(default=1, ge=1)
    notes: str = ""

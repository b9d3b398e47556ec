"""
Inventory products: one row per physical unit (or stocked quantity) owned by the business.
"""

from sqlalchemy import Column, Float, Integer, String, Text, JSON

from luxselle.database import Base
from luxselle.core.enums import ProductStatus
from luxselle.models.base import DocumentMixin


class Product(DocumentMixin, Base):
    __tablename__ = "products"

    brand = Column(String, nullable=False, index=True)
    model = Column(String, nullable=False)
    title = Column(String, nullable=False, default="")
    sku = Column(String, nullable=False, default="")
    category = Column(String, nullable=False, default="")
    condition = Column(String, nullable=False, default="")
    colour = Column(String, nullable=False, default="")

    # Pricing (EUR)
    cost_price_eur = Column(Float, nullable=False)
    sell_price_eur = Column(Float, nullable=False)
    customs_eur = Column(Float, nullable=False, default=0.0)
    vat_eur = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="EUR")

    status = Column(String(16), nullable=False, default=ProductStatus.IN_STOCK.value, index=True)
    quantity = Column(Integer, nullable=False, default=1)

    # Media
    images = Column(JSON, nullable=False, default=list)
    image_urls = Column(JSON, nullable=False, default=list)

    notes = Column(Text, nullable=False, default="")

    @property
    def display_title(self):
        """Always returns a title - stored or computed."""
        if self.title:
            return self.title
        return f"{self.brand} {self.model}".strip()

    def __repr__(self):
        return f"<Product {self.id} {self.brand} {self.model} ({self.status})>"

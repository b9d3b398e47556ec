from sqlalchemy import Column, Float, String, Text

from luxselle.database import Base
from luxselle.core.enums import SourcingPriority, SourcingStatus
from luxselle.models.base import DocumentMixin


class SourcingRequest(DocumentMixin, Base):
    __tablename__ = "sourcing_requests"

    customer_name = Column(String, nullable=False)
    query_text = Column(Text, nullable=False)
    brand = Column(String, nullable=False, default="")
    budget = Column(Float, nullable=False)
    priority = Column(String(8), nullable=False, default=SourcingPriority.MEDIUM.value)
    status = Column(String(16), nullable=False, default=SourcingStatus.OPEN.value, index=True)
    notes = Column(Text, nullable=False, default="")
    linked_product_id = Column(String(32), nullable=True)
    linked_supplier_item_id = Column(String(32), nullable=True)

    def __repr__(self):
        return f"<SourcingRequest {self.id} {self.customer_name} ({self.status})>"

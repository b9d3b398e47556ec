"""
Customer invoices. Line items are stored inline; totals are computed when the
invoice is issued and never recalculated.
"""

from sqlalchemy import Column, DateTime, Float, String, Text, JSON, UniqueConstraint

from luxselle.database import Base
from luxselle.models.base import DocumentMixin


class Invoice(DocumentMixin, Base):
    __tablename__ = "invoices"
    __table_args__ = (
        UniqueConstraint("organisation_id", "invoice_number", name="uq_invoices_org_number"),
    )

    invoice_number = Column(String(32), nullable=False)
    customer_name = Column(String, nullable=False, default="")
    customer_email = Column(String, nullable=True)
    line_items = Column(JSON, nullable=False, default=list)

    subtotal_eur = Column(Float, nullable=False)
    vat_eur = Column(Float, nullable=False)
    total_eur = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="EUR")
    issued_at = Column(DateTime(timezone=True), nullable=False, index=True)

    transaction_id = Column(String(32), nullable=True)
    product_id = Column(String(32), nullable=True)
    notes = Column(Text, nullable=False, default="")

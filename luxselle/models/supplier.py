from sqlalchemy import Column, DateTime, Float, Integer, String, Text, JSON

from luxselle.database import Base
from luxselle.core.enums import SupplierAvailability, SupplierStatus
from luxselle.models.base import DocumentMixin


class Supplier(DocumentMixin, Base):
    __tablename__ = "suppliers"

    name = Column(String, nullable=False)
    contact_name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=False, default="")
    whatsapp_number = Column(String, nullable=True)
    notes = Column(Text, nullable=False, default="")
    status = Column(String(16), nullable=False, default=SupplierStatus.ACTIVE.value)
    region = Column(String(16), nullable=False, default="EU")
    item_count = Column(Integer, nullable=False, default=0)

    # Column mapping used by templated imports (see schemas.supplier.SupplierImportTemplate)
    import_template = Column(JSON, nullable=True)
    source_emails = Column(JSON, nullable=False, default=list)

    def __repr__(self):
        return f"<Supplier {self.id} {self.name}>"


class SupplierItem(DocumentMixin, Base):
    __tablename__ = "supplier_items"

    supplier_id = Column(String(32), nullable=False, index=True)
    external_id = Column(String, nullable=False)
    title = Column(String, nullable=False)
    brand = Column(String, nullable=False, default="")
    sku = Column(String, nullable=False, default="")
    condition_rank = Column(String, nullable=False, default="")
    ask_price_usd = Column(Float, nullable=False)
    ask_price_eur = Column(Float, nullable=False)
    selling_price_usd = Column(Float, nullable=True)
    selling_price_eur = Column(Float, nullable=True)
    availability = Column(String(16), nullable=False, default=SupplierAvailability.UPLOADED.value)
    image_url = Column(String, nullable=False, default="")
    source_url = Column(String, nullable=False, default="")
    raw_payload = Column(JSON, nullable=False, default=dict)
    last_seen_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self):
        return f"<SupplierItem {self.id} {self.external_id}>"


class SupplierImportRecord(DocumentMixin, Base):
    """
    One row per imported supplier file; `dedupe_id` (sha256) is unique so a
    file is never imported twice for the same supplier.
    """
    __tablename__ = "supplier_import_records"

    dedupe_id = Column(String(64), nullable=False, unique=True)
    supplier_id = Column(String(32), nullable=False, index=True)
    file_name = Column(String, nullable=False, default="")
    source = Column(String(16), nullable=False, default="upload")  # upload, email
    imported_count = Column(Integer, nullable=False, default=0)

"""
Schemas for suppliers, supplier items and the templated spreadsheet import.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from luxselle.core.enums import SupplierAvailability, SupplierStatus
from luxselle.schemas.base import ApiModel, DocumentRead, reject_null


class SupplierColumnMap(ApiModel):
    """Maps a target field to the source spreadsheet column that holds it."""
    external_id: Optional[str] = None
    title: Optional[str] = None
    brand: Optional[str] = None
    sku: Optional[str] = None
    condition_rank: Optional[str] = None
    ask_price_usd: Optional[str] = None
    ask_price_eur: Optional[str] = None
    selling_price_usd: Optional[str] = None
    selling_price_eur: Optional[str] = None
    availability: Optional[str] = None
    image_url: Optional[str] = None
    source_url: Optional[str] = None


class SupplierImportTemplate(ApiModel):
    column_map: SupplierColumnMap = Field(default_factory=SupplierColumnMap)
    availability_map: Dict[str, SupplierAvailability] = Field(default_factory=dict)
    default_availability: SupplierAvailability = SupplierAvailability.UPLOADED
    trim_values: bool = True


class SupplierBase(ApiModel):
    name: str = Field(min_length=1)
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    whatsapp_number: Optional[str] = None
    notes: str = ""
    status: SupplierStatus = SupplierStatus.ACTIVE
    region: str = "EU"
    import_template: Optional[SupplierImportTemplate] = None
    source_emails: List[str] = Field(default_factory=list)


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=1)
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    whatsapp_number: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[SupplierStatus] = None
    region: Optional[str] = None
    import_template: Optional[SupplierImportTemplate] = None
    source_emails: Optional[List[str]] = None

    @field_validator('name', 'contact_name', 'email', 'phone', 'notes', 'status', 'region', 'source_emails', mode='before')
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class SupplierRead(SupplierBase, DocumentRead):
    item_count: int = 0


class SupplierItemRead(DocumentRead):
    supplier_id: str
    external_id: str
    title: str
    brand: str = ""
    sku: str = ""
    condition_rank: str = ""
    ask_price_usd: float
    ask_price_eur: float
    selling_price_usd: Optional[float] = None
    selling_price_eur: Optional[float] = None
    availability: SupplierAvailability
    image_url: str = ""
    source_url: str = ""
    raw_payload: Dict[str, Any] = {}
    last_seen_at: datetime


class ImportPreview(ApiModel):
    headers: List[str]
    rows: List[Dict[str, str]]
    total_rows: int


class ImportResult(ApiModel):
    total: int = 0
    success: int = 0
    errors: int = 0
    error_messages: List[str] = Field(default_factory=list)
    job_id: Optional[str] = None

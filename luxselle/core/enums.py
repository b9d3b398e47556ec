"""
Shared enums and constants used across the application.
"""

from enum import Enum

DEFAULT_ORG_ID = "default"


class ProductStatus(str, Enum):
    """Product status values used in both models and schemas"""
    IN_STOCK = "in_stock"
    SOLD = "sold"
    RESERVED = "reserved"


class BuyingListStatus(str, Enum):
    PENDING = "pending"
    ORDERED = "ordered"
    RECEIVED = "received"       # terminal for the receive operation
    CANCELLED = "cancelled"


class BuyingListSource(str, Enum):
    MANUAL = "manual"
    EVALUATOR = "evaluator"
    SUPPLIER = "supplier"


class SourcingStatus(str, Enum):
    OPEN = "open"
    SOURCING = "sourcing"
    SOURCED = "sourced"
    FULFILLED = "fulfilled"
    LOST = "lost"


class SourcingPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SupplierStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    ERROR = "error"


class SupplierAvailability(str, Enum):
    UPLOADED = "uploaded"
    SOLD = "sold"
    WAITING = "waiting"


class TransactionType(str, Enum):
    PURCHASE = "purchase"
    SALE = "sale"
    ADJUSTMENT = "adjustment"


class JobStatus(str, Enum):
    """Lifecycle: queued -> running -> succeeded | failed"""
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class AiRoutingMode(str, Enum):
    DYNAMIC = "dynamic"
    OPENAI = "openai"
    PERPLEXITY = "perplexity"


class AiProvider(str, Enum):
    OPENAI = "openai"
    PERPLEXITY = "perplexity"


class AiTaskType(str, Enum):
    WEB_SEARCH = "web_search"
    STRUCTURED_EXTRACTION_JSON = "structured_extraction_json"
    FREEFORM_GENERATION = "freeform_generation"


class ActivityEventType(str, Enum):
    BUYLIST_ADDED = "buylist_added"
    BUYLIST_RECEIVED = "buylist_received"
    PRODUCT_CREATED = "product_created"
    PRODUCT_SOLD = "product_sold"
    SOURCING_CREATED = "sourcing_created"
    SOURCING_STATUS_CHANGED = "sourcing_status_changed"
    SUPPLIER_IMPORT = "supplier_import"
    JOB_RETRIED = "job_retried"
    JOB_CANCELLED = "job_cancelled"
    INVOICE_CREATED = "invoice_created"

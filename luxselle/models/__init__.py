from .activity_event import ActivityEvent
from .buying_list import BuyingListItem
from .evaluation import Evaluation
from .invoice import Invoice
from .product import Product
from .settings import OrgSettings
from .sourcing_request import SourcingRequest
from .supplier import Supplier, SupplierItem, SupplierImportRecord
from .system_job import SystemJob
from .transaction import Transaction

# This ensures all models are registered with SQLAlchemy
__all__ = [
    'ActivityEvent',
    'BuyingListItem',
    'Evaluation',
    'Invoice',
    'Product',
    'OrgSettings',
    'SourcingRequest',
    'Supplier',
    'SupplierItem',
    'SupplierImportRecord',
    'SystemJob',
    'Transaction',
]

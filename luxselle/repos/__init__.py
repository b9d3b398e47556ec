from .activity import ActivityEventRepo
from .base import BaseRepo
from .buying_list import BuyingListRepo
from .evaluations import EvaluationRepo
from .jobs import SystemJobRepo
from .products import ProductRepo
from .settings import SettingsRepo
from .sourcing import SourcingRequestRepo
from .suppliers import SupplierImportRecordRepo, SupplierItemRepo, SupplierRepo
from .transactions import TransactionRepo

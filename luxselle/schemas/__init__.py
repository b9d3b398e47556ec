from .base import ApiModel, DataResponse, ListResponse, PageResponse
from .buying_list import BuyingListItemCreate, BuyingListItemRead, BuyingListItemUpdate, ReceiveResult
from .product import ProductCreate, ProductRead, ProductSell, ProductUpdate
from .sourcing import SourcingRequestCreate, SourcingRequestRead, SourcingRequestUpdate
from .supplier import (
    ImportPreview,
    ImportResult,
    SupplierCreate,
    SupplierImportTemplate,
    SupplierItemRead,
    SupplierRead,
    SupplierUpdate,
)

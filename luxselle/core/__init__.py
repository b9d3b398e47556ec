"""
Core module exports.
"""
from .enums import (
    DEFAULT_ORG_ID,
    ProductStatus,
    BuyingListStatus,
    SourcingStatus,
    TransactionType,
    JobStatus,
)

from .exceptions import (
    BaseServiceError,
    NotFoundError,
    ValidationError,
    AlreadyReceivedError,
    InvalidStatusTransitionError,
    JobStateError,
    ImportFileError,
    DuplicateImportError,
    AiProviderError,
)

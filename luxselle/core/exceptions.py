from typing import Any, Dict, Optional


class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass


class NotFoundError(BaseServiceError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationError(BaseServiceError):
    """Raised when data validation fails outside of request parsing."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.details = details
        super().__init__(message)


class AlreadyReceivedError(BaseServiceError):
    """Raised when a buying list item has already been received."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__("Item already received")


class InvalidStatusTransitionError(BaseServiceError):
    """Raised when a status change is not allowed by the transition table."""

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__("Invalid status transition")

    @property
    def details(self) -> Dict[str, str]:
        return {"from": self.from_status, "to": self.to_status}


class JobStateError(BaseServiceError):
    """Raised when a job cannot be retried or cancelled from its current state."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details
        super().__init__(message)


class InsufficientStockError(BaseServiceError):
    """Raised when selling a product that has no stock left."""
    pass


class ImportFileError(BaseServiceError):
    """Raised when an uploaded supplier file cannot be parsed."""
    pass


class DuplicateImportError(BaseServiceError):
    """Raised when the same supplier file has already been imported."""

    def __init__(self, dedupe_id: str):
        self.dedupe_id = dedupe_id
        super().__init__("This file has already been imported for the supplier")


class DuplicateInvoiceNumberError(BaseServiceError):
    """Raised when an explicit invoice number is already in use."""

    def __init__(self, invoice_number: str):
        self.invoice_number = invoice_number
        super().__init__(f"Invoice number {invoice_number} already exists")


class AiProviderError(BaseServiceError):
    """
    Raised by the AI router and its provider clients.

    `code` is one of: no_provider_available, provider_http_error, timeout,
    invalid_json, invalid_schema, network_error, empty_response, unknown.
    """

    def __init__(self, code: str, message: str, status: Optional[int] = None):
        self.code = code
        self.status = status
        super().__init__(message)

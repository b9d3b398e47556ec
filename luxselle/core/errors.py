"""
Uniform API error envelope and the FastAPI exception handlers that produce it.

Response format: {"error": {"code", "message", "details"?}}
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from luxselle.core.exceptions import (
    AiProviderError,
    AlreadyReceivedError,
    BaseServiceError,
    DuplicateImportError,
    DuplicateInvoiceNumberError,
    ImportFileError,
    InsufficientStockError,
    InvalidStatusTransitionError,
    JobStateError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ApiErrorCode:
    VALIDATION = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL_ERROR"
    BAD_GATEWAY = "BAD_GATEWAY"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


HTTP_STATUS_CODES = {
    400: ApiErrorCode.BAD_REQUEST,
    404: ApiErrorCode.NOT_FOUND,
    409: ApiErrorCode.CONFLICT,
    422: ApiErrorCode.VALIDATION,
    502: ApiErrorCode.BAD_GATEWAY,
    503: ApiErrorCode.SERVICE_UNAVAILABLE,
}


def format_api_error(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    """Builds the standard JSON error body."""
    error: Dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


def _error_response(status_code: int, code: str, message: str, details: Optional[Any] = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=format_api_error(code, message, details))


def _field_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    details = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "form")]
        details.append({"path": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return details


def _track(request: Request, category: str) -> None:
    tracker = getattr(request.app.state, "error_tracker", None)
    if tracker is not None:
        tracker.track(category)


def classify_service_error(exc: BaseServiceError):
    """Map a domain exception to (status, code, category, details)."""
    if isinstance(exc, NotFoundError):
        return 404, ApiErrorCode.NOT_FOUND, "not_found", None
    if isinstance(exc, InvalidStatusTransitionError):
        return 400, ApiErrorCode.BAD_REQUEST, "domain", exc.details
    if isinstance(exc, (AlreadyReceivedError, InsufficientStockError, ImportFileError)):
        return 400, ApiErrorCode.BAD_REQUEST, "domain", None
    if isinstance(exc, JobStateError):
        return 400, ApiErrorCode.BAD_REQUEST, "domain", exc.details
    if isinstance(exc, DuplicateImportError):
        return 409, ApiErrorCode.CONFLICT, "domain", {"dedupeId": exc.dedupe_id}
    if isinstance(exc, DuplicateInvoiceNumberError):
        return 409, ApiErrorCode.CONFLICT, "domain", {"invoiceNumber": exc.invoice_number}
    if isinstance(exc, ValidationError):
        return 400, ApiErrorCode.VALIDATION, "validation", exc.details
    if isinstance(exc, AiProviderError):
        if exc.code == "no_provider_available":
            return 503, ApiErrorCode.SERVICE_UNAVAILABLE, "ai_provider", {"providerCode": exc.code}
        return 502, ApiErrorCode.BAD_GATEWAY, "ai_provider", {"providerCode": exc.code}
    return 400, ApiErrorCode.BAD_REQUEST, "domain", None


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope-producing handlers to the application."""

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        _track(request, "validation")
        return _error_response(400, ApiErrorCode.VALIDATION, "Validation error", _field_errors(exc.errors()))

    @app.exception_handler(BaseServiceError)
    async def service_error_handler(request: Request, exc: BaseServiceError):
        status_code, code, category, details = classify_service_error(exc)
        _track(request, category)
        if category == "ai_provider":
            logger.warning(f"AI provider failure on {request.url.path}: {exc}")
        return _error_response(status_code, code, str(exc), details)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_STATUS_CODES.get(exc.status_code, ApiErrorCode.BAD_REQUEST)
        if exc.status_code == 404:
            _track(request, "not_found")
        return _error_response(exc.status_code, code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        _track(request, "database")
        logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        return _error_response(500, ApiErrorCode.INTERNAL, "Internal server error")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        _track(request, "internal")
        logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
        return _error_response(500, ApiErrorCode.INTERNAL, "Internal server error")

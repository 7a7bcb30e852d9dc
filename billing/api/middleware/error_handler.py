"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action

NotFound -> 404, Validation -> 400, request schema -> 422, Conflict -> 409,
Upstream -> 503, anything else -> 500. In production, 5xx messages are
replaced by a generic one.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from billing.application.dto.responses import ErrorResponse
from billing.config import get_logger, get_settings
from billing.core.exceptions import (
    BillingError,
    ConfigurationError,
    ConflictError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)

logger = get_logger(__name__)


# Map exceptions to HTTP status codes
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    UpstreamError: status.HTTP_503_SERVICE_UNAVAILABLE,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "COMPANY_NOT_FOUND": "Check the company ID.",
    "BRANCH_NOT_FOUND": "Check the branch ID and that it belongs to the company.",
    "CLIENT_NOT_FOUND": "Check the client ID and that it belongs to the company.",
    "CATEGORY_NOT_FOUND": "The category is missing from the branch catalog or was deleted. Reload the branch catalog.",
    "SUBCATEGORY_NOT_FOUND": "The product is missing from the category or was deleted. Reload the branch catalog.",
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET .../invoices to list invoices.",
    "INVALID_QUANTITY": "Quantities must be whole numbers of at least 1.",
    "EMPTY_INVOICE": "Add at least one item before creating the invoice.",
    "INVALID_DATE_RANGE": "Use YYYY-MM-DD dates with startDate on or before endDate.",
    "VALIDATION_ERROR": "Check the request body against the API schema.",
    "INVOICE_NUMBER_CONFLICT": "Another invoice took this number. Retry the request.",
    "DATABASE_ERROR": "A database operation failed. Retry later.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "The requested resource was not found. Verify the ID.",
    409: "The request conflicted with a concurrent change. Retry.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
    503: "The service is temporarily unavailable. Retry later.",
}

GENERIC_SERVER_ERROR = "An internal error occurred"


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response."""
    status_code = _status_for(exc)

    if isinstance(exc, BillingError):
        error_code = exc.code
        message = exc.message
        detail = exc.details or None
    else:
        error_code = exc.__class__.__name__
        message = str(exc)
        detail = None

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        request_id=getattr(request.state, "request_id", None),
        path=request.url.path,
        error_type=error_code,
        error=str(exc),
        traceback=traceback.format_exc() if status_code >= 500 else None,
    )

    if status_code >= 500 and get_settings().is_production:
        message = GENERIC_SERVER_ERROR
        detail = None

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        detail=detail,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches anything the exception handlers did not and converts it to a
    standardized JSON error response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)
        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(BillingError)
    async def billing_exception_handler(
        request: Request,
        exc: BillingError,
    ) -> JSONResponse:
        """Handle domain errors raised by routes and use cases."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = "NOT_FOUND" if exc.status_code == 404 else "HTTP_ERROR"
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=exc.detail or "An error occurred",
                hint=_get_hint(error_code, exc.status_code),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

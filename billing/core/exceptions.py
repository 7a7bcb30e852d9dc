"""
Domain exceptions for the billing service.

Four families map onto client-visible behavior:
- NotFoundError: a referenced record is absent or soft-deleted
- ValidationError: the caller sent something it can correct
- ConflictError: a retriable collision (invoice numbering)
- UpstreamError: the data store failed
"""

from typing import Any


class BillingError(Exception):
    """Base exception for all billing errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Not Found Exceptions
class NotFoundError(BillingError):
    """Base exception for missing or soft-deleted records."""

    def __init__(self, entity: str, entity_id: Any, code: str | None = None):
        super().__init__(
            f"{entity.capitalize()} not found: {entity_id}",
            code=code or f"{entity.upper()}_NOT_FOUND",
            details={f"{entity}_id": entity_id},
        )


class CompanyNotFoundError(NotFoundError):
    """Company absent or soft-deleted."""

    def __init__(self, company_id: int):
        super().__init__("company", company_id)


class BranchNotFoundError(NotFoundError):
    """Branch absent, soft-deleted, or owned by another company."""

    def __init__(self, branch_id: int):
        super().__init__("branch", branch_id)


class ClientNotFoundError(NotFoundError):
    """Client absent, soft-deleted, or owned by another company."""

    def __init__(self, client_id: int):
        super().__init__("client", client_id)


class CategoryNotFoundError(NotFoundError):
    """Category absent from the branch catalog or soft-deleted."""

    def __init__(self, category_id: int, branch_id: int | None = None):
        super().__init__("category", category_id)
        if branch_id is not None:
            self.details["branch_id"] = branch_id


class SubcategoryNotFoundError(NotFoundError):
    """Subcategory absent from its category or soft-deleted."""

    def __init__(self, subcategory_id: int, category_id: int | None = None):
        super().__init__("subcategory", subcategory_id)
        if category_id is not None:
            self.details["category_id"] = category_id


class InvoiceNotFoundError(NotFoundError):
    """Invoice absent or soft-deleted."""

    def __init__(self, invoice_id: int):
        super().__init__("invoice", invoice_id)


# Validation Exceptions
class ValidationError(BillingError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InvalidQuantityError(ValidationError):
    """Line item quantity resolved to zero or less."""

    def __init__(self, quantity: Any, index: int | None = None):
        field = "quantity" if index is None else f"items[{index}].quantity"
        super().__init__(field=field, message="Quantity must be at least 1", value=quantity)
        self.code = "INVALID_QUANTITY"


class EmptyInvoiceError(ValidationError):
    """Invoice creation requested without line items."""

    def __init__(self) -> None:
        super().__init__(
            field="items",
            message="At least one item is required to create an invoice",
        )
        self.code = "EMPTY_INVOICE"


class InvalidDateRangeError(ValidationError):
    """Report date range could not be parsed or is inverted."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(field="dateRange", message=message, value=value)
        self.code = "INVALID_DATE_RANGE"


# Conflict Exceptions
class ConflictError(BillingError):
    """A concurrent write collided; the caller may retry."""

    pass


class InvoiceNumberConflictError(ConflictError):
    """Allocated invoice number already exists in the branch."""

    def __init__(self, branch_id: int, invoice_number: str):
        super().__init__(
            f"Invoice number {invoice_number} already exists in branch {branch_id}",
            code="INVOICE_NUMBER_CONFLICT",
            details={"branch_id": branch_id, "invoice_number": invoice_number},
        )


# Upstream Exceptions
class UpstreamError(BillingError):
    """Base exception for data store failures."""

    pass


class DatabaseError(UpstreamError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(BillingError):
    """Configuration error."""

    pass

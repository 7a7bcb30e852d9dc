"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation, camelCase on the wire.
These are the ONLY contracts between API and use cases.
"""

import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from billing.core.entities.invoice import PaymentMethod, PaymentStatus


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Companies and catalog ---


class CreateCompanyRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Company name")
    gst_number: str = Field(..., min_length=1, description="Company GST registration number")
    address: str = Field(default="", description="Registered address")
    owner_name: str = Field(default="", description="Owner name")
    phone: str = Field(default="", description="Contact phone")
    email: str = Field(default="", description="Contact email")


class CreateSubcategoryRequest(CamelModel):
    """A sellable product under a category."""

    name: str = Field(..., min_length=1, description="Product name")
    description: str = Field(default="", description="Product description")
    price: float = Field(default=0.0, ge=0, description="Unit price")
    discount: float = Field(default=0.0, ge=0, le=100, description="Catalog discount %")
    gst: float = Field(default=0.0, ge=0, description="GST rate %")


class CreateCategoryRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Category name")
    subcategories: list[CreateSubcategoryRequest] = Field(
        default_factory=list, description="Products created with the category"
    )


class CreateBranchRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Branch name; its first letters prefix invoice numbers")
    location: str = Field(default="", description="Branch location")
    manager_name: str = Field(default="", description="Branch manager")
    is_default: bool = Field(default=False, description="Company's default branch")
    categories: list[CreateCategoryRequest] = Field(
        default_factory=list, description="Initial catalog"
    )


# --- Clients ---


class CreateClientRequest(CamelModel):
    name: str = Field(..., min_length=1, description="Client name")
    branch_id: int | None = Field(default=None, description="Home branch")
    email: str = Field(default="", description="Contact email")
    phone: str = Field(default="", description="Contact phone")
    address: str = Field(default="", description="Postal address")
    is_regular: bool = Field(default=False, description="Regular client with standing discount")
    discount_percentage: float = Field(
        default=0.0, ge=0, le=100, description="Standing discount %, applied only to regular clients"
    )


class MarkRegularRequest(CamelModel):
    is_regular: bool = Field(default=True, description="Regular flag")
    discount_percentage: float = Field(default=0.0, ge=0, le=100, description="Standing discount %")


# --- Invoices ---


class InvoiceItemRequest(CamelModel):
    """
    A requested invoice line.

    Percentages drive the service-style pricing path; absolute
    discountAmount/gstAmount values are used as given.
    """

    category_id: int = Field(..., description="Catalog category ID")
    subcategory_id: int = Field(..., description="Catalog subcategory ID")
    quantity: Any = Field(default=None, description="Units; missing or invalid means 1", examples=[2])
    name: str | None = Field(default=None, description="Override the catalog name")
    description: str | None = Field(default=None, description="Override the catalog description")
    unit_price: float | None = Field(default=None, ge=0, description="Override the catalog price")
    discount_percentage: float | None = Field(
        default=None, ge=0, le=100, description="Item discount %; a regular client's standing discount is the floor"
    )
    discount_amount: float | None = Field(default=None, description="Absolute discount amount")
    gst_percentage: float | None = Field(default=None, ge=0, description="Override the catalog GST rate %")
    gst_amount: float | None = Field(default=None, description="Absolute GST amount")


class CreateInvoiceRequest(CamelModel):
    client_id: int = Field(..., description="Client being invoiced")
    items: list[InvoiceItemRequest] = Field(default_factory=list, description="Line items")
    date: dt.datetime | None = Field(default=None, description="Invoice date, defaults to now")
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING)
    payment_method: PaymentMethod = Field(default=PaymentMethod.CASH)
    notes: str = Field(default="", description="Free-text notes")
    due_date: dt.date | None = Field(default=None, description="Payment due date")


class UpdateInvoiceRequest(CamelModel):
    """Only payment fields are mutable after creation."""

    payment_status: PaymentStatus | None = None
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    due_date: dt.date | None = None


# --- Reports ---


class RevenueReportRequest(CamelModel):
    client_type: str = Field(default="all", description="all, regular or non-regular")
    date_range: str | None = Field(default=None, description="7d, 30d or 90d")
    start_date: dt.date | None = Field(default=None, description="Custom range start (YYYY-MM-DD)")
    end_date: dt.date | None = Field(default=None, description="Custom range end (YYYY-MM-DD)")


class ClientPortfolioRequest(CamelModel):
    client_type: str = Field(default="all", description="all, regular or non-regular")
    date_range: Literal["7d", "30d", "90d", "all"] = Field(default="30d")


class SalesReportRequest(CamelModel):
    branch_id: int | None = Field(default=None, description="Restrict to one branch")
    start_date: dt.date | None = Field(default=None, description="First day (inclusive)")
    end_date: dt.date | None = Field(default=None, description="Last day (inclusive)")

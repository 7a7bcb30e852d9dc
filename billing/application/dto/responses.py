"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization, camelCase on the wire.
These are the ONLY contracts between use cases and API layer.
"""

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from billing.core.entities.report import (
    CategoryPerformance,
    ClientStats,
    DailySales,
    PriceListEntry,
    ProductSales,
    RankedSubcategory,
    ReportWindow,
    SalesSummary,
    SegmentStats,
)


class CamelResponse(BaseModel):
    """Serialized with camelCase names; built from entities by attribute."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# --- Companies and catalog ---


class CompanyResponse(CamelResponse):
    id: int
    name: str
    gst_number: str
    address: str = ""
    owner_name: str = ""
    phone: str = ""
    email: str = ""
    created_at: dt.datetime


class SubcategoryResponse(CamelResponse):
    id: int
    name: str
    description: str = ""
    price: float
    discount: float = 0.0
    gst: float = 0.0


class CategoryResponse(CamelResponse):
    id: int
    name: str
    subcategories: list[SubcategoryResponse] = Field(default_factory=list)


class BranchResponse(CamelResponse):
    """Branch with its live catalog."""

    id: int
    company_id: int
    name: str
    location: str = ""
    manager_name: str = ""
    is_default: bool = False
    categories: list[CategoryResponse] = Field(default_factory=list)
    created_at: dt.datetime


# --- Clients ---


class ClientResponse(CamelResponse):
    id: int
    company_id: int
    branch_id: int | None = None
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    is_regular: bool = False
    discount_percentage: float = 0.0
    created_at: dt.datetime


class ClientSnapshotResponse(CamelResponse):
    """Client as it was when the invoice was issued."""

    id: int
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    is_regular: bool = False
    discount_percentage: float = 0.0


class PriceListResponse(CamelResponse):
    client: ClientResponse
    items: list[PriceListEntry] = Field(default_factory=list)


# --- Invoices ---


class InvoiceItemResponse(CamelResponse):
    id: int | None = None
    category_id: int
    subcategory_id: int
    category_name: str = ""
    subcategory_name: str = ""
    name: str
    description: str = ""
    quantity: int
    unit_price: float
    discount_percentage: float = 0.0
    discount_amount: float = 0.0
    gst_rate: float = 0.0
    gst_amount: float = 0.0
    final_amount: float | None = None


class InvoiceResponse(CamelResponse):
    id: int
    invoice_number: str
    date: dt.datetime
    company_id: int
    branch_id: int
    client_id: int
    client: ClientSnapshotResponse
    client_type: str
    company_gst: str = ""
    items: list[InvoiceItemResponse] = Field(default_factory=list)
    subtotal: float
    total_discount: float
    total_gst: float
    grand_total: float
    payment_status: str
    payment_method: str
    notes: str = ""
    due_date: dt.date | None = None
    created_at: dt.datetime
    updated_at: dt.datetime


class InvoiceListResponse(CamelResponse):
    invoices: list[InvoiceResponse] = Field(default_factory=list)
    total: int = 0


# --- Reports ---


class RevenueSummaryResponse(CamelResponse):
    total_revenue: float = 0.0
    total_invoices: int = 0
    avg_invoice_value: float = 0.0
    period_start: dt.datetime
    period_end: dt.datetime
    total_days: int = 0


class ClientInsightsResponse(CamelResponse):
    regular_clients: int = 0
    total_clients: int = 0
    regular_clients_revenue_percentage: int = 0
    filtered_clients: int = 0


class TopClientResponse(CamelResponse):
    client_id: int
    name: str
    is_regular: bool
    total_spent: float
    invoice_count: int
    avg_purchase: float
    last_purchase_date: dt.datetime | None = None


class RevenueReportResponse(CamelResponse):
    """Branch revenue report."""

    summary: RevenueSummaryResponse
    periods: list[ReportWindow] = Field(default_factory=list)
    category_performance: list[CategoryPerformance] = Field(default_factory=list)
    top_subcategories: list[RankedSubcategory] = Field(default_factory=list)
    client_insights: ClientInsightsResponse = Field(default_factory=ClientInsightsResponse)
    top_clients: list[TopClientResponse] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)


class PortfolioSummaryResponse(CamelResponse):
    total_clients: int = 0
    regular_clients: int = 0
    non_regular_clients: int = 0
    regular_client_percentage: int = 0
    total_revenue: float = 0.0
    revenue_from_regular: float = 0.0
    revenue_from_non_regular: float = 0.0
    avg_revenue_per_client: float = 0.0
    avg_revenue_per_regular: float = 0.0
    avg_revenue_per_non_regular: float = 0.0
    total_invoices: int = 0
    total_items_sold: int = 0


class ClientSegmentsResponse(CamelResponse):
    regular: SegmentStats
    non_regular: SegmentStats


class ClientPortfolioResponse(CamelResponse):
    summary: PortfolioSummaryResponse
    segments: ClientSegmentsResponse
    top_clients: list[ClientStats] = Field(default_factory=list)
    filters: dict[str, Any] = Field(default_factory=dict)


class SalesReportResponse(CamelResponse):
    sales_report: list[DailySales] = Field(default_factory=list)
    product_report: list[ProductSales] = Field(default_factory=list)
    summary: SalesSummary = Field(default_factory=SalesSummary)


# --- Errors ---


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: Any = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: dt.datetime = Field(default_factory=dt.datetime.now)


# --- Health ---


class ProviderHealthResponse(CamelResponse):
    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(CamelResponse):
    status: str
    version: str
    uptime_seconds: float = 0.0
    database: ProviderHealthResponse | None = None

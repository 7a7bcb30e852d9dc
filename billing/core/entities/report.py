"""
Report entities.

Pure Pydantic models, never persisted. Computed on demand from an invoice
snapshot and serialized with camelCase field names.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base for report documents (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Period revenue ---


class ReportWindow(ReportModel):
    """Revenue aggregated over one inclusive full-day window."""

    name: str
    start: datetime
    end: datetime
    revenue: float = 0.0
    count: int = 0
    average_value: float = 0.0


# --- Category performance ---


class SubcategoryRevenue(ReportModel):
    name: str
    revenue: float = 0.0


class TopSubcategory(ReportModel):
    name: str = ""
    revenue: float = 0.0


class CategoryPerformance(ReportModel):
    """Revenue of one catalog category per reporting window."""

    id: int
    name: str
    daily_revenue: float = 0.0
    weekly_revenue: float = 0.0
    monthly_revenue: float = 0.0
    total_revenue: float = 0.0  # selected report range
    subcategories: dict[int, SubcategoryRevenue] = Field(default_factory=dict)
    top_subcategory: TopSubcategory = Field(default_factory=TopSubcategory)


class RankedSubcategory(ReportModel):
    rank: int
    subcategory_id: int
    name: str
    category: str
    category_id: int
    revenue: float


# --- Client segmentation ---


class SegmentStats(ReportModel):
    """Aggregates for one client segment."""

    count: int = 0
    revenue: float = 0.0
    invoices: int = 0
    items: int = 0
    avg_invoice_value: float = 0.0
    avg_revenue_per_client: float = 0.0
    percentage_of_revenue: int = 0


class ClientStats(ReportModel):
    """Running purchase statistics for one client."""

    client_id: int
    name: str
    is_regular: bool
    total_spent: float = 0.0
    invoice_count: int = 0
    items_purchased: int = 0
    first_purchase_date: datetime | None = None
    last_purchase_date: datetime | None = None
    avg_spend_per_invoice: float = 0.0
    days_since_last_purchase: int | None = None


class SegmentationReport(ReportModel):
    total_clients: int = 0
    regular_clients: int = 0
    non_regular_clients: int = 0
    regular_client_percentage: int = 0
    total_revenue: float = 0.0
    total_invoices: int = 0
    total_items_sold: int = 0
    avg_revenue_per_client: float = 0.0
    regular: SegmentStats = Field(default_factory=SegmentStats)
    non_regular: SegmentStats = Field(default_factory=SegmentStats)
    top_clients: list[ClientStats] = Field(default_factory=list)


# --- Sales report ---


class DailySales(ReportModel):
    date: date
    total_sales: float = 0.0
    invoice_count: int = 0


class ProductSales(ReportModel):
    subcategory_id: int
    product_name: str
    category_name: str = ""
    subcategory_name: str = ""
    total_quantity: int = 0
    total_amount: float = 0.0


class SalesSummary(ReportModel):
    total_invoices: int = 0
    total_amount: float = 0.0
    avg_invoice_value: float = 0.0
    paid_invoices: int = 0
    pending_invoices: int = 0
    partially_paid_invoices: int = 0


# --- Client price list ---


class PriceListEntry(ReportModel):
    """A live catalog entry priced for one client."""

    branch_id: int
    branch_name: str
    category_id: int
    category_name: str
    subcategory_id: int
    name: str
    description: str = ""
    price: float
    gst: float = 0.0
    discount_percentage: float = 0.0
    discounted_price: float

"""Core domain entities."""

from billing.core.entities.catalog import (
    Branch,
    CatalogEntry,
    Category,
    Company,
    Subcategory,
)
from billing.core.entities.client import Client, ClientRef, ClientSnapshot
from billing.core.entities.invoice import (
    ClientType,
    Invoice,
    InvoiceFilter,
    InvoiceUpdate,
    LineItemRequest,
    PaymentMethod,
    PaymentStatus,
    PricedLineItem,
)
from billing.core.entities.report import (
    CategoryPerformance,
    ClientStats,
    DailySales,
    PriceListEntry,
    ProductSales,
    RankedSubcategory,
    ReportWindow,
    SalesSummary,
    SegmentationReport,
    SegmentStats,
    SubcategoryRevenue,
    TopSubcategory,
)

__all__ = [
    # Catalog
    "Company",
    "Branch",
    "Category",
    "Subcategory",
    "CatalogEntry",
    # Client
    "Client",
    "ClientRef",
    "ClientSnapshot",
    # Invoice
    "ClientType",
    "Invoice",
    "InvoiceFilter",
    "InvoiceUpdate",
    "LineItemRequest",
    "PaymentMethod",
    "PaymentStatus",
    "PricedLineItem",
    # Reports
    "CategoryPerformance",
    "ClientStats",
    "DailySales",
    "PriceListEntry",
    "ProductSales",
    "RankedSubcategory",
    "ReportWindow",
    "SalesSummary",
    "SegmentationReport",
    "SegmentStats",
    "SubcategoryRevenue",
    "TopSubcategory",
]

"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from billing.application.dto.requests import (
    ClientPortfolioRequest,
    CreateBranchRequest,
    CreateCategoryRequest,
    CreateClientRequest,
    CreateCompanyRequest,
    CreateInvoiceRequest,
    CreateSubcategoryRequest,
    InvoiceItemRequest,
    MarkRegularRequest,
    RevenueReportRequest,
    SalesReportRequest,
    UpdateInvoiceRequest,
)
from billing.application.dto.responses import (
    BranchResponse,
    CategoryResponse,
    ClientPortfolioResponse,
    ClientResponse,
    CompanyResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceListResponse,
    InvoiceResponse,
    PriceListResponse,
    RevenueReportResponse,
    SalesReportResponse,
    SubcategoryResponse,
)

__all__ = [
    # Requests
    "ClientPortfolioRequest",
    "CreateBranchRequest",
    "CreateCategoryRequest",
    "CreateClientRequest",
    "CreateCompanyRequest",
    "CreateInvoiceRequest",
    "CreateSubcategoryRequest",
    "InvoiceItemRequest",
    "MarkRegularRequest",
    "RevenueReportRequest",
    "SalesReportRequest",
    "UpdateInvoiceRequest",
    # Responses
    "BranchResponse",
    "CategoryResponse",
    "ClientPortfolioResponse",
    "ClientResponse",
    "CompanyResponse",
    "ErrorResponse",
    "HealthResponse",
    "InvoiceListResponse",
    "InvoiceResponse",
    "PriceListResponse",
    "RevenueReportResponse",
    "SalesReportResponse",
    "SubcategoryResponse",
]

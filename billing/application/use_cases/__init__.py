"""Application use cases."""

from billing.application.use_cases.create_invoice import (
    CreateInvoiceResult,
    CreateInvoiceUseCase,
    invoice_to_response,
)
from billing.application.use_cases.generate_revenue_report import (
    GenerateRevenueReportUseCase,
    RevenueReportResult,
)
from billing.application.use_cases.generate_sales_report import (
    GenerateSalesReportUseCase,
    SalesReportResult,
)
from billing.application.use_cases.get_client_portfolio import (
    ClientPortfolioResult,
    GetClientPortfolioUseCase,
)
from billing.application.use_cases.get_client_price_list import (
    ClientPriceListResult,
    GetClientPriceListUseCase,
)

__all__ = [
    "CreateInvoiceUseCase",
    "CreateInvoiceResult",
    "invoice_to_response",
    "GenerateRevenueReportUseCase",
    "RevenueReportResult",
    "GenerateSalesReportUseCase",
    "SalesReportResult",
    "GetClientPortfolioUseCase",
    "ClientPortfolioResult",
    "GetClientPriceListUseCase",
    "ClientPriceListResult",
]

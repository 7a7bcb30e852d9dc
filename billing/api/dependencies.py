"""
Dependency injection container for FastAPI.

Provides store and use case instances to route handlers. Use cases receive
their stores through the store dependencies, so tests can swap stores with
app.dependency_overrides.
"""

from fastapi import Depends

from billing.application.use_cases import (
    CreateInvoiceUseCase,
    GenerateRevenueReportUseCase,
    GenerateSalesReportUseCase,
    GetClientPortfolioUseCase,
    GetClientPriceListUseCase,
)
from billing.core.interfaces import ICatalogStore, IClientStore, IInvoiceStore
from billing.infrastructure.storage.sqlite import (
    get_catalog_store,
    get_client_store,
    get_invoice_store,
)


# Store dependencies
async def get_catalog() -> ICatalogStore:
    """Get catalog store."""
    return await get_catalog_store()


async def get_clients() -> IClientStore:
    """Get client store."""
    return await get_client_store()


async def get_invoices() -> IInvoiceStore:
    """Get invoice store."""
    return await get_invoice_store()


# Use case dependencies
def get_create_invoice_use_case(
    catalog: ICatalogStore = Depends(get_catalog),
    clients: IClientStore = Depends(get_clients),
    invoices: IInvoiceStore = Depends(get_invoices),
) -> CreateInvoiceUseCase:
    """Get create invoice use case."""
    return CreateInvoiceUseCase(
        catalog_store=catalog, client_store=clients, invoice_store=invoices
    )


def get_revenue_report_use_case(
    catalog: ICatalogStore = Depends(get_catalog),
    clients: IClientStore = Depends(get_clients),
    invoices: IInvoiceStore = Depends(get_invoices),
) -> GenerateRevenueReportUseCase:
    """Get revenue report use case."""
    return GenerateRevenueReportUseCase(
        catalog_store=catalog, client_store=clients, invoice_store=invoices
    )


def get_client_portfolio_use_case(
    catalog: ICatalogStore = Depends(get_catalog),
    clients: IClientStore = Depends(get_clients),
    invoices: IInvoiceStore = Depends(get_invoices),
) -> GetClientPortfolioUseCase:
    """Get client portfolio use case."""
    return GetClientPortfolioUseCase(
        catalog_store=catalog, client_store=clients, invoice_store=invoices
    )


def get_sales_report_use_case(
    catalog: ICatalogStore = Depends(get_catalog),
    invoices: IInvoiceStore = Depends(get_invoices),
) -> GenerateSalesReportUseCase:
    """Get sales report use case."""
    return GenerateSalesReportUseCase(catalog_store=catalog, invoice_store=invoices)


def get_client_price_list_use_case(
    catalog: ICatalogStore = Depends(get_catalog),
    clients: IClientStore = Depends(get_clients),
) -> GetClientPriceListUseCase:
    """Get client price list use case."""
    return GetClientPriceListUseCase(catalog_store=catalog, client_store=clients)

"""Generate Sales Report Use Case: company-wide daily and per-product sales."""

from dataclasses import dataclass

from billing.application.dto.requests import SalesReportRequest
from billing.application.dto.responses import SalesReportResponse
from billing.application.use_cases.report_data import fetch_invoices
from billing.config import BillingSettings, get_logger, get_settings
from billing.core.entities.invoice import InvoiceFilter
from billing.core.entities.report import DailySales, ProductSales, SalesSummary
from billing.core.exceptions import (
    BranchNotFoundError,
    CompanyNotFoundError,
    InvalidDateRangeError,
)
from billing.core.interfaces.catalog_store import ICatalogStore
from billing.core.interfaces.invoice_store import IInvoiceStore
from billing.core.services import sales_report
from billing.core.services.period_bucketer import end_of_day, start_of_day

logger = get_logger(__name__)

REPORT_NAME = "sales_report"


@dataclass
class SalesReportResult:
    daily: list[DailySales]
    products: list[ProductSales]
    summary: SalesSummary


class GenerateSalesReportUseCase:
    """Sales per day and per product across a company, optionally one branch."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        billing_settings: BillingSettings | None = None,
    ):
        self._catalog_store = catalog_store
        self._invoice_store = invoice_store
        self._settings = billing_settings or get_settings().billing

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from billing.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from billing.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def execute(
        self, company_id: int, request: SalesReportRequest
    ) -> SalesReportResult:
        """Execute sales report use case."""
        if (
            request.start_date is not None
            and request.end_date is not None
            and request.start_date > request.end_date
        ):
            raise InvalidDateRangeError(
                "Start date must not be after end date",
                value=f"{request.start_date}..{request.end_date}",
            )

        catalog_store = await self._get_catalog_store()
        if await catalog_store.get_company(company_id) is None:
            raise CompanyNotFoundError(company_id)
        if request.branch_id is not None:
            branch = await catalog_store.get_branch(request.branch_id, company_id=company_id)
            if branch is None:
                raise BranchNotFoundError(request.branch_id)

        invoices = await fetch_invoices(
            await self._get_invoice_store(),
            InvoiceFilter(
                company_id=company_id,
                branch_id=request.branch_id,
                start=start_of_day(request.start_date) if request.start_date else None,
                end=end_of_day(request.end_date) if request.end_date else None,
            ),
            REPORT_NAME,
        )

        places = self._settings.money_places
        result = SalesReportResult(
            daily=sales_report.daily_sales(invoices, places),
            products=sales_report.product_sales(invoices, places),
            summary=sales_report.summary(invoices, places),
        )
        logger.info(
            "sales_report_generated",
            company_id=company_id,
            invoices=result.summary.total_invoices,
            days=len(result.daily),
        )
        return result

    def to_response(self, result: SalesReportResult) -> SalesReportResponse:
        """Convert result to API response."""
        return SalesReportResponse(
            sales_report=result.daily,
            product_report=result.products,
            summary=result.summary,
        )

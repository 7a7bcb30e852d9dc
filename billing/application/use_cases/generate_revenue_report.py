"""
Generate Revenue Report Use Case.

Composes period bucketing, category performance and client segmentation
over one invoice snapshot fetched for the branch.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from billing.application.dto.requests import RevenueReportRequest
from billing.application.dto.responses import (
    ClientInsightsResponse,
    RevenueReportResponse,
    RevenueSummaryResponse,
    TopClientResponse,
)
from billing.application.use_cases.report_data import fetch_clients, fetch_invoices
from billing.config import BillingSettings, get_logger, get_settings
from billing.core.entities.invoice import ClientType, InvoiceFilter
from billing.core.entities.report import (
    CategoryPerformance,
    RankedSubcategory,
    ReportWindow,
    SegmentationReport,
)
from billing.core.exceptions import BranchNotFoundError, InvalidDateRangeError
from billing.core.interfaces.catalog_store import ICatalogStore
from billing.core.interfaces.client_store import IClientStore
from billing.core.interfaces.invoice_store import IInvoiceStore
from billing.core.services import category_performance, client_segmentation
from billing.core.services.period_bucketer import (
    RELATIVE_RANGES,
    WindowSpec,
    bucket,
    covering,
    custom_window,
    fixed_windows,
    relative_window,
)

logger = get_logger(__name__)

REPORT_NAME = "revenue_report"


@dataclass
class RevenueReportResult:
    """Everything computed for one revenue report."""

    report_range: WindowSpec
    range_summary: ReportWindow
    periods: list[ReportWindow]
    categories: list[CategoryPerformance]
    top_subcategories: list[RankedSubcategory]
    segmentation: SegmentationReport
    filtered_clients: int
    recommendations: list[str]
    filters: dict[str, Any] = field(default_factory=dict)


class GenerateRevenueReportUseCase:
    """Branch revenue report with category, subcategory and client breakdowns."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        client_store: IClientStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        billing_settings: BillingSettings | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._catalog_store = catalog_store
        self._client_store = client_store
        self._invoice_store = invoice_store
        self._settings = billing_settings or get_settings().billing
        self._clock = clock

    async def _get_catalog_store(self) -> ICatalogStore:
        if self._catalog_store is None:
            from billing.infrastructure.storage.sqlite import get_catalog_store

            self._catalog_store = await get_catalog_store()
        return self._catalog_store

    async def _get_client_store(self) -> IClientStore:
        if self._client_store is None:
            from billing.infrastructure.storage.sqlite import get_client_store

            self._client_store = await get_client_store()
        return self._client_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from billing.infrastructure.storage.sqlite import get_invoice_store

            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    def resolve_range(self, request: RevenueReportRequest, now: datetime) -> WindowSpec:
        """Custom start/end when both are given, else a relative range (unknown means default)."""
        if request.start_date is not None or request.end_date is not None:
            if request.start_date is None or request.end_date is None:
                raise InvalidDateRangeError(
                    "Both startDate and endDate are required for a custom range",
                    value=f"{request.start_date}..{request.end_date}",
                )
            return custom_window(request.start_date, request.end_date)

        days = RELATIVE_RANGES.get(
            request.date_range or "", RELATIVE_RANGES[self._settings.default_date_range]
        )
        return relative_window(days, now)

    async def execute(
        self, company_id: int, branch_id: int, request: RevenueReportRequest
    ) -> RevenueReportResult:
        """Execute revenue report use case."""
        client_type = ClientType.from_filter(request.client_type)
        now = self._clock()
        report_range = self.resolve_range(request, now)

        logger.info(
            "revenue_report_started",
            branch_id=branch_id,
            client_type=request.client_type,
            start=report_range.start.isoformat(),
            end=report_range.end.isoformat(),
        )

        catalog_store = await self._get_catalog_store()
        branch = await catalog_store.get_branch(branch_id, company_id=company_id)
        if branch is None:
            raise BranchNotFoundError(branch_id)

        windows = category_performance.PerformanceWindows.for_report(now, report_range)
        period_specs = fixed_windows(now) + [report_range]
        span = covering(period_specs + windows.all())

        invoices = await fetch_invoices(
            await self._get_invoice_store(),
            InvoiceFilter(
                branch_id=branch_id,
                client_type=client_type,
                start=span.start,
                end=span.end,
            ),
            REPORT_NAME,
        )
        clients = await fetch_clients(
            await self._get_client_store(),
            company_id,
            REPORT_NAME,
            is_regular=client_type.is_regular if client_type else None,
        )

        places = self._settings.money_places
        periods = bucket(invoices, period_specs, places)
        range_invoices = [inv for inv in invoices if report_range.contains(inv.date)]

        performance = category_performance.aggregate(
            branch,
            invoices,
            windows,
            top_limit=self._settings.top_subcategories_limit,
            places=places,
        )
        segmentation = client_segmentation.segment(
            clients,
            range_invoices,
            now,
            top_limit=self._settings.report_top_clients_limit,
            places=places,
        )

        result = RevenueReportResult(
            report_range=report_range,
            range_summary=periods[-1],
            periods=periods[:-1],
            categories=performance.categories,
            top_subcategories=performance.top_subcategories,
            segmentation=segmentation,
            filtered_clients=len({inv.client_id for inv in range_invoices}),
            recommendations=self.recommend(
                segmentation,
                performance.categories,
                performance.top_subcategories,
                client_type,
            ),
            filters={
                "clientType": request.client_type or "all",
                "dateRange": request.date_range,
                "startDate": request.start_date.isoformat() if request.start_date else None,
                "endDate": request.end_date.isoformat() if request.end_date else None,
            },
        )

        logger.info(
            "revenue_report_generated",
            branch_id=branch_id,
            invoices=len(range_invoices),
            revenue=result.range_summary.revenue,
        )
        return result

    def recommend(
        self,
        segmentation: SegmentationReport,
        categories: list[CategoryPerformance],
        top_subcategories: list[RankedSubcategory],
        client_type: ClientType | None,
    ) -> list[str]:
        """Actionable hints derived from the report figures."""
        recommendations = []

        regular_share = segmentation.regular.percentage_of_revenue
        if (
            regular_share < self._settings.regular_revenue_alert_percentage
            and client_type is not ClientType.NON_REGULAR
        ):
            recommendations.append(
                f"Focus on regular clients - they generate only {regular_share}% of revenue"
            )

        if top_subcategories:
            recommendations.append(f"Promote top subcategory: {top_subcategories[0].name}")

        idle = category_performance.categories_without_revenue(categories)
        if idle:
            recommendations.append(f"Review categories with no revenue: {', '.join(idle)}")

        return recommendations

    def to_response(self, result: RevenueReportResult) -> RevenueReportResponse:
        """Convert result to API response."""
        seg = result.segmentation
        return RevenueReportResponse(
            summary=RevenueSummaryResponse(
                total_revenue=result.range_summary.revenue,
                total_invoices=result.range_summary.count,
                avg_invoice_value=result.range_summary.average_value,
                period_start=result.report_range.start,
                period_end=result.report_range.end,
                total_days=result.report_range.days,
            ),
            periods=result.periods,
            category_performance=result.categories,
            top_subcategories=result.top_subcategories,
            client_insights=ClientInsightsResponse(
                regular_clients=seg.regular_clients,
                total_clients=seg.total_clients,
                regular_clients_revenue_percentage=seg.regular.percentage_of_revenue,
                filtered_clients=result.filtered_clients,
            ),
            top_clients=[
                TopClientResponse(
                    client_id=c.client_id,
                    name=c.name,
                    is_regular=c.is_regular,
                    total_spent=c.total_spent,
                    invoice_count=c.invoice_count,
                    avg_purchase=c.avg_spend_per_invoice,
                    last_purchase_date=c.last_purchase_date,
                )
                for c in seg.top_clients
            ],
            recommendations=result.recommendations,
            filters=result.filters,
        )

"""Get Client Portfolio Use Case: regular vs non-regular client analytics for a branch."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from billing.application.dto.requests import ClientPortfolioRequest
from billing.application.dto.responses import (
    ClientPortfolioResponse,
    ClientSegmentsResponse,
    PortfolioSummaryResponse,
)
from billing.application.use_cases.report_data import fetch_clients, fetch_invoices
from billing.config import BillingSettings, get_logger, get_settings
from billing.core.entities.invoice import ClientType, InvoiceFilter
from billing.core.entities.report import SegmentationReport
from billing.core.exceptions import BranchNotFoundError
from billing.core.interfaces.catalog_store import ICatalogStore
from billing.core.interfaces.client_store import IClientStore
from billing.core.interfaces.invoice_store import IInvoiceStore
from billing.core.services.client_segmentation import segment
from billing.core.services.period_bucketer import RELATIVE_RANGES

logger = get_logger(__name__)

REPORT_NAME = "client_portfolio"


@dataclass
class ClientPortfolioResult:
    segmentation: SegmentationReport
    filters: dict[str, Any] = field(default_factory=dict)


class GetClientPortfolioUseCase:
    """
    Segment a company's clients by their purchases at one branch.

    Clients come from the live client records (optionally only regular or
    only non-regular); invoices are the branch's invoices for those clients
    since the start of the selected range.
    """

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

    async def execute(
        self, company_id: int, branch_id: int, request: ClientPortfolioRequest
    ) -> ClientPortfolioResult:
        """Execute client portfolio use case."""
        client_type = ClientType.from_filter(request.client_type)
        now = self._clock()

        catalog_store = await self._get_catalog_store()
        branch = await catalog_store.get_branch(branch_id, company_id=company_id)
        if branch is None:
            raise BranchNotFoundError(branch_id)

        clients = await fetch_clients(
            await self._get_client_store(),
            company_id,
            REPORT_NAME,
            is_regular=client_type.is_regular if client_type else None,
        )

        start = None
        if request.date_range != "all":
            start = now - timedelta(days=RELATIVE_RANGES[request.date_range])

        invoices = []
        if clients:
            invoices = await fetch_invoices(
                await self._get_invoice_store(),
                InvoiceFilter(
                    branch_id=branch_id,
                    client_ids=[c.id for c in clients],
                    start=start,
                ),
                REPORT_NAME,
            )

        segmentation = segment(
            clients,
            invoices,
            now,
            top_limit=self._settings.top_clients_limit,
            places=self._settings.money_places,
        )

        logger.info(
            "client_portfolio_generated",
            branch_id=branch_id,
            clients=segmentation.total_clients,
            invoices=segmentation.total_invoices,
        )

        return ClientPortfolioResult(
            segmentation=segmentation,
            filters={
                "clientType": request.client_type or "all",
                "dateRange": request.date_range,
            },
        )

    def to_response(self, result: ClientPortfolioResult) -> ClientPortfolioResponse:
        """Convert result to API response."""
        seg = result.segmentation
        return ClientPortfolioResponse(
            summary=PortfolioSummaryResponse(
                total_clients=seg.total_clients,
                regular_clients=seg.regular_clients,
                non_regular_clients=seg.non_regular_clients,
                regular_client_percentage=seg.regular_client_percentage,
                total_revenue=seg.total_revenue,
                revenue_from_regular=seg.regular.revenue,
                revenue_from_non_regular=seg.non_regular.revenue,
                avg_revenue_per_client=seg.avg_revenue_per_client,
                avg_revenue_per_regular=seg.regular.avg_revenue_per_client,
                avg_revenue_per_non_regular=seg.non_regular.avg_revenue_per_client,
                total_invoices=seg.total_invoices,
                total_items_sold=seg.total_items_sold,
            ),
            segments=ClientSegmentsResponse(
                regular=seg.regular,
                non_regular=seg.non_regular,
            ),
            top_clients=seg.top_clients,
            filters=result.filters,
        )

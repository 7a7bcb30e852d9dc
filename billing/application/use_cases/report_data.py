"""
Snapshot fetching for report use cases.

Reports are best-effort over historical data: a store failure empties the
affected section instead of failing the request.
"""

from billing.config import get_logger
from billing.core.entities.client import Client
from billing.core.entities.invoice import Invoice, InvoiceFilter
from billing.core.exceptions import UpstreamError
from billing.core.interfaces.client_store import IClientStore
from billing.core.interfaces.invoice_store import IInvoiceStore

logger = get_logger(__name__)


async def fetch_invoices(
    store: IInvoiceStore, query: InvoiceFilter, report: str
) -> list[Invoice]:
    try:
        return await store.list_invoices(query)
    except UpstreamError as e:
        logger.warning(
            "report_section_degraded",
            report=report,
            section="invoices",
            error=e.message,
            exc_info=True,
        )
        return []


async def fetch_clients(
    store: IClientStore,
    company_id: int,
    report: str,
    is_regular: bool | None = None,
) -> list[Client]:
    try:
        return await store.list_clients(company_id, is_regular=is_regular)
    except UpstreamError as e:
        logger.warning(
            "report_section_degraded",
            report=report,
            section="clients",
            error=e.message,
            exc_info=True,
        )
        return []

"""Create Invoice Use Case: resolve catalog lines, price them and persist atomically."""

from dataclasses import dataclass
from datetime import datetime

from billing.application.dto.requests import CreateInvoiceRequest
from billing.application.dto.responses import (
    ClientSnapshotResponse,
    InvoiceItemResponse,
    InvoiceResponse,
)
from billing.config import BillingSettings, get_logger, get_settings
from billing.core.entities.client import ClientRef
from billing.core.entities.invoice import (
    ClientType,
    Invoice,
    LineItemRequest,
    PricedLineItem,
)
from billing.core.exceptions import (
    BranchNotFoundError,
    ClientNotFoundError,
    CompanyNotFoundError,
    EmptyInvoiceError,
)
from billing.core.interfaces.catalog_store import ICatalogStore
from billing.core.interfaces.client_store import IClientStore
from billing.core.interfaces.invoice_store import IInvoiceStore
from billing.core.services import catalog_resolver, invoice_totals, line_item_pricer
from billing.core.services.invoice_numbering import InvoiceNumberAllocator

logger = get_logger(__name__)


@dataclass
class CreateInvoiceResult:
    """Result of creating an invoice."""

    invoice: Invoice


class CreateInvoiceUseCase:
    """
    Issue an invoice for a client of a branch.

    All-or-nothing: any unresolvable catalog line or invalid quantity aborts
    before anything is written, and numbering plus insertion run in one
    store transaction.
    """

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        client_store: IClientStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        billing_settings: BillingSettings | None = None,
    ):
        self._catalog_store = catalog_store
        self._client_store = client_store
        self._invoice_store = invoice_store
        self._settings = billing_settings or get_settings().billing

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
        self, company_id: int, branch_id: int, request: CreateInvoiceRequest
    ) -> CreateInvoiceResult:
        """Execute create invoice use case."""
        logger.info(
            "create_invoice_started",
            company_id=company_id,
            branch_id=branch_id,
            client_id=request.client_id,
            items=len(request.items),
        )

        catalog_store = await self._get_catalog_store()
        client_store = await self._get_client_store()
        invoice_store = await self._get_invoice_store()

        company = await catalog_store.get_company(company_id)
        if company is None:
            raise CompanyNotFoundError(company_id)

        branch = await catalog_store.get_branch(branch_id, company_id=company_id)
        if branch is None:
            raise BranchNotFoundError(branch_id)

        client = await client_store.get_client(request.client_id, company_id=company_id)
        if client is None:
            raise ClientNotFoundError(request.client_id)

        if not request.items:
            raise EmptyInvoiceError()

        places = self._settings.money_places
        items: list[PricedLineItem] = []
        for index, item_req in enumerate(request.items):
            entry = catalog_resolver.resolve(
                branch, item_req.category_id, item_req.subcategory_id
            )
            line = LineItemRequest(**item_req.model_dump())
            items.append(
                line_item_pricer.price(entry, line, client, index=index, places=places)
            )

        totals = invoice_totals.aggregate(items, places=places)

        invoice = Invoice(
            date=request.date or datetime.now(),
            company_id=company_id,
            branch_id=branch_id,
            client_ref=ClientRef(id=client.id),
            client_snapshot=client.snapshot(),
            client_type=ClientType.for_client(client.is_regular),
            company_gst=company.gst_number,
            items=items,
            subtotal=totals.subtotal,
            total_discount=totals.total_discount,
            total_gst=totals.total_gst,
            grand_total=totals.grand_total,
            payment_status=request.payment_status,
            payment_method=request.payment_method,
            notes=request.notes,
            due_date=request.due_date,
        )

        allocator = InvoiceNumberAllocator(
            prefix_length=self._settings.invoice_prefix_length,
            width=self._settings.invoice_number_width,
            filler=self._settings.invoice_prefix_filler,
        )
        invoice = await invoice_store.create_invoice(
            invoice, allocator.for_branch(branch.name)
        )

        logger.info(
            "invoice_created",
            invoice_id=invoice.id,
            invoice_number=invoice.invoice_number,
            grand_total=invoice.grand_total,
        )

        return CreateInvoiceResult(invoice=invoice)

    def to_response(self, result: CreateInvoiceResult) -> InvoiceResponse:
        """Convert result to API response."""
        return invoice_to_response(result.invoice)


def invoice_to_response(invoice: Invoice) -> InvoiceResponse:
    """Convert an Invoice entity to its response DTO."""
    return InvoiceResponse(
        id=invoice.id,  # type: ignore[arg-type]
        invoice_number=invoice.invoice_number,
        date=invoice.date,
        company_id=invoice.company_id,
        branch_id=invoice.branch_id,
        client_id=invoice.client_id,
        client=ClientSnapshotResponse.model_validate(invoice.client_snapshot),
        client_type=invoice.client_type.value,
        company_gst=invoice.company_gst,
        items=[InvoiceItemResponse.model_validate(item) for item in invoice.items],
        subtotal=invoice.subtotal,
        total_discount=invoice.total_discount,
        total_gst=invoice.total_gst,
        grand_total=invoice.grand_total,
        payment_status=invoice.payment_status.value,
        payment_method=invoice.payment_method.value,
        notes=invoice.notes,
        due_date=invoice.due_date,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )

"""Invoice endpoints for one branch."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from billing.api.dependencies import get_catalog, get_create_invoice_use_case, get_invoices
from billing.application.dto.requests import CreateInvoiceRequest, UpdateInvoiceRequest
from billing.application.dto.responses import (
    ErrorResponse,
    InvoiceListResponse,
    InvoiceResponse,
)
from billing.application.use_cases.create_invoice import (
    CreateInvoiceUseCase,
    invoice_to_response,
)
from billing.config import get_logger
from billing.core.entities.invoice import InvoiceFilter, InvoiceUpdate, PaymentStatus
from billing.core.exceptions import BranchNotFoundError, InvalidDateRangeError, InvoiceNotFoundError
from billing.core.interfaces import ICatalogStore, IInvoiceStore
from billing.core.services.period_bucketer import end_of_day, start_of_day

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/companies/{company_id}/branches/{branch_id}/invoices",
    tags=["invoices"],
)


async def _require_branch(catalog: ICatalogStore, company_id: int, branch_id: int) -> None:
    if await catalog.get_branch(branch_id, company_id=company_id) is None:
        raise BranchNotFoundError(branch_id)


@router.post(
    "",
    response_model=InvoiceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def create_invoice(
    company_id: int,
    branch_id: int,
    request: CreateInvoiceRequest,
    use_case: CreateInvoiceUseCase = Depends(get_create_invoice_use_case),
) -> InvoiceResponse:
    """
    Issue an invoice.

    Every line must reference a live category and subcategory of the branch;
    one bad line rejects the whole invoice.
    """
    result = await use_case.execute(company_id, branch_id, request)
    return use_case.to_response(result)


@router.get(
    "",
    response_model=InvoiceListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_invoices(
    company_id: int,
    branch_id: int,
    payment_status: PaymentStatus | None = Query(default=None, alias="paymentStatus"),
    client_id: int | None = Query(default=None, alias="clientId"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    catalog: ICatalogStore = Depends(get_catalog),
    store: IInvoiceStore = Depends(get_invoices),
) -> InvoiceListResponse:
    """List a branch's live invoices with optional filters."""
    await _require_branch(catalog, company_id, branch_id)
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError(
            "Start date must not be after end date", value=f"{start_date}..{end_date}"
        )

    invoices = await store.list_invoices(
        InvoiceFilter(
            branch_id=branch_id,
            client_ids=[client_id] if client_id is not None else None,
            payment_status=payment_status,
            start=start_of_day(start_date) if start_date else None,
            end=end_of_day(end_date) if end_date else None,
            limit=limit,
            offset=offset,
        )
    )
    return InvoiceListResponse(
        invoices=[invoice_to_response(inv) for inv in invoices],
        total=len(invoices),
    )


@router.get(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_invoice(
    company_id: int,
    branch_id: int,
    invoice_id: int,
    catalog: ICatalogStore = Depends(get_catalog),
    store: IInvoiceStore = Depends(get_invoices),
) -> InvoiceResponse:
    """Get an invoice with its line items."""
    await _require_branch(catalog, company_id, branch_id)
    invoice = await store.get_invoice(invoice_id, branch_id=branch_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)
    return invoice_to_response(invoice)


@router.patch(
    "/{invoice_id}",
    response_model=InvoiceResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_invoice(
    company_id: int,
    branch_id: int,
    invoice_id: int,
    request: UpdateInvoiceRequest,
    catalog: ICatalogStore = Depends(get_catalog),
    store: IInvoiceStore = Depends(get_invoices),
) -> InvoiceResponse:
    """Update payment status, method, notes or due date."""
    await _require_branch(catalog, company_id, branch_id)
    if await store.get_invoice(invoice_id, branch_id=branch_id) is None:
        raise InvoiceNotFoundError(invoice_id)

    invoice = await store.update_invoice(
        invoice_id, InvoiceUpdate(**request.model_dump(exclude_unset=True))
    )
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)

    logger.info(
        "invoice_updated",
        invoice_id=invoice_id,
        payment_status=invoice.payment_status.value,
    )
    return invoice_to_response(invoice)


@router.delete(
    "/{invoice_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_invoice(
    company_id: int,
    branch_id: int,
    invoice_id: int,
    catalog: ICatalogStore = Depends(get_catalog),
    store: IInvoiceStore = Depends(get_invoices),
) -> Response:
    """Soft-delete an invoice; its number stays consumed."""
    await _require_branch(catalog, company_id, branch_id)
    if await store.get_invoice(invoice_id, branch_id=branch_id) is None:
        raise InvoiceNotFoundError(invoice_id)
    if not await store.soft_delete_invoice(invoice_id):
        raise InvoiceNotFoundError(invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Client endpoints."""

from fastapi import APIRouter, Depends, status

from billing.api.dependencies import get_catalog, get_client_price_list_use_case, get_clients
from billing.application.dto.requests import CreateClientRequest, MarkRegularRequest
from billing.application.dto.responses import (
    ClientResponse,
    ErrorResponse,
    PriceListResponse,
)
from billing.application.use_cases.get_client_price_list import GetClientPriceListUseCase
from billing.core.entities.client import Client
from billing.core.exceptions import BranchNotFoundError, ClientNotFoundError, CompanyNotFoundError
from billing.core.interfaces import ICatalogStore, IClientStore

router = APIRouter(prefix="/api/companies/{company_id}/clients", tags=["clients"])


@router.post(
    "",
    response_model=ClientResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}},
)
async def create_client(
    company_id: int,
    request: CreateClientRequest,
    catalog: ICatalogStore = Depends(get_catalog),
    store: IClientStore = Depends(get_clients),
) -> ClientResponse:
    """Register a client of the company."""
    if await catalog.get_company(company_id) is None:
        raise CompanyNotFoundError(company_id)
    if request.branch_id is not None:
        if await catalog.get_branch(request.branch_id, company_id=company_id) is None:
            raise BranchNotFoundError(request.branch_id)

    client = await store.create_client(Client(company_id=company_id, **request.model_dump()))
    return ClientResponse.model_validate(client)


@router.get(
    "/{client_id}",
    response_model=ClientResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_client(
    company_id: int,
    client_id: int,
    store: IClientStore = Depends(get_clients),
) -> ClientResponse:
    """Get a client by ID."""
    client = await store.get_client(client_id, company_id=company_id)
    if client is None:
        raise ClientNotFoundError(client_id)
    return ClientResponse.model_validate(client)


@router.post(
    "/{client_id}/regular",
    response_model=ClientResponse,
    responses={404: {"model": ErrorResponse}},
)
async def mark_regular(
    company_id: int,
    client_id: int,
    request: MarkRegularRequest,
    store: IClientStore = Depends(get_clients),
) -> ClientResponse:
    """Set or clear the client's regular status and standing discount."""
    if await store.get_client(client_id, company_id=company_id) is None:
        raise ClientNotFoundError(client_id)

    client = await store.mark_regular(
        client_id, request.is_regular, request.discount_percentage
    )
    if client is None:
        raise ClientNotFoundError(client_id)
    return ClientResponse.model_validate(client)


@router.get(
    "/{client_id}/prices",
    response_model=PriceListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_client_prices(
    company_id: int,
    client_id: int,
    use_case: GetClientPriceListUseCase = Depends(get_client_price_list_use_case),
) -> PriceListResponse:
    """The company's live catalog with the client's discount applied."""
    result = await use_case.execute(company_id, client_id)
    return use_case.to_response(result)

"""Get Client Price List Use Case."""

from dataclasses import dataclass

from billing.application.dto.responses import ClientResponse, PriceListResponse
from billing.config import BillingSettings, get_logger, get_settings
from billing.core.entities.client import Client
from billing.core.entities.report import PriceListEntry
from billing.core.exceptions import ClientNotFoundError
from billing.core.interfaces.catalog_store import ICatalogStore
from billing.core.interfaces.client_store import IClientStore
from billing.core.services.price_list import build_price_list

logger = get_logger(__name__)


@dataclass
class ClientPriceListResult:
    client: Client
    entries: list[PriceListEntry]


class GetClientPriceListUseCase:
    """The company's live catalog priced for one client."""

    def __init__(
        self,
        catalog_store: ICatalogStore | None = None,
        client_store: IClientStore | None = None,
        billing_settings: BillingSettings | None = None,
    ):
        self._catalog_store = catalog_store
        self._client_store = client_store
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

    async def execute(self, company_id: int, client_id: int) -> ClientPriceListResult:
        """Execute client price list use case."""
        client_store = await self._get_client_store()
        client = await client_store.get_client(client_id, company_id=company_id)
        if client is None:
            raise ClientNotFoundError(client_id)

        catalog_store = await self._get_catalog_store()
        branches = await catalog_store.list_branches(company_id)
        entries = build_price_list(branches, client, self._settings.money_places)

        logger.info(
            "client_price_list_built",
            client_id=client_id,
            branches=len(branches),
            entries=len(entries),
        )
        return ClientPriceListResult(client=client, entries=entries)

    def to_response(self, result: ClientPriceListResult) -> PriceListResponse:
        """Convert result to API response."""
        return PriceListResponse(
            client=ClientResponse.model_validate(result.client),
            items=result.entries,
        )

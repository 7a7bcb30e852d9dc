"""Abstract interface for client storage."""

from abc import ABC, abstractmethod

from billing.core.entities.client import Client


class IClientStore(ABC):
    """Interface for client persistence. Soft-deleted clients are never returned."""

    @abstractmethod
    async def create_client(self, client: Client) -> Client:
        """Create a client."""
        pass

    @abstractmethod
    async def get_client(
        self, client_id: int, company_id: int | None = None
    ) -> Client | None:
        """Get client by ID, optionally scoped to a company."""
        pass

    @abstractmethod
    async def list_clients(
        self,
        company_id: int,
        is_regular: bool | None = None,
        client_ids: list[int] | None = None,
    ) -> list[Client]:
        """List a company's clients, optionally by regularity or id."""
        pass

    @abstractmethod
    async def mark_regular(
        self, client_id: int, is_regular: bool, discount_percentage: float
    ) -> Client | None:
        """Set the client's regular flag and standing discount."""
        pass

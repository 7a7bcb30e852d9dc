"""Client domain entities."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from billing.core.interfaces.client_store import IClientStore


class Client(BaseModel):
    """A customer of a company, optionally on a standing discount."""

    id: int | None = None
    company_id: int
    branch_id: int | None = None
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    is_regular: bool = False
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    deleted_at: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def standing_discount(self) -> float:
        """Discount percentage the client is entitled to; 0 unless regular."""
        return self.discount_percentage if self.is_regular else 0.0

    def snapshot(self) -> ClientSnapshot:
        """Freeze the client's current state for embedding in an invoice."""
        return ClientSnapshot(
            id=self.id,  # type: ignore[arg-type]
            name=self.name,
            email=self.email,
            phone=self.phone,
            address=self.address,
            is_regular=self.is_regular,
            discount_percentage=self.discount_percentage,
        )


class ClientSnapshot(BaseModel):
    """Client data as it was when an invoice was issued."""

    model_config = {"frozen": True}

    id: int
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    is_regular: bool = False
    discount_percentage: float = 0.0


class ClientRef(BaseModel):
    """Weak reference to the live client record behind an invoice."""

    model_config = {"frozen": True}

    id: int

    async def resolve(self, store: IClientStore) -> Client | None:
        """Fetch the client's current state, or None if it is gone."""
        return await store.get_client(self.id)

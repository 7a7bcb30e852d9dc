"""Abstract interface for invoice storage."""

from abc import ABC, abstractmethod
from collections.abc import Callable

from billing.core.entities.invoice import Invoice, InvoiceFilter, InvoiceUpdate


class IInvoiceStore(ABC):
    """Interface for invoice persistence."""

    @abstractmethod
    async def count_invoices(self, branch_id: int) -> int:
        """Count every invoice ever issued by a branch, soft-deleted included."""
        pass

    @abstractmethod
    async def create_invoice(
        self, invoice: Invoice, allocate: Callable[[int], str]
    ) -> Invoice:
        """
        Persist an invoice with all its items.

        The invoice number is produced by calling allocate with the branch's
        current invoice count. Counting, allocation and insertion happen in
        one serialized transaction per branch.
        """
        pass

    @abstractmethod
    async def get_invoice(
        self, invoice_id: int, branch_id: int | None = None
    ) -> Invoice | None:
        """Get a live invoice by ID with items."""
        pass

    @abstractmethod
    async def list_invoices(self, query: InvoiceFilter) -> list[Invoice]:
        """List invoices with items, ordered by date."""
        pass

    @abstractmethod
    async def update_invoice(
        self, invoice_id: int, update: InvoiceUpdate
    ) -> Invoice | None:
        """Apply payment field changes to a live invoice."""
        pass

    @abstractmethod
    async def soft_delete_invoice(self, invoice_id: int) -> bool:
        """Mark an invoice deleted. Returns False if it was not live."""
        pass

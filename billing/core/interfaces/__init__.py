"""Core interfaces (ports) for dependency injection."""

from billing.core.interfaces.catalog_store import ICatalogStore
from billing.core.interfaces.client_store import IClientStore
from billing.core.interfaces.invoice_store import IInvoiceStore

__all__ = [
    "ICatalogStore",
    "IClientStore",
    "IInvoiceStore",
]

"""SQLite storage implementations."""

from billing.infrastructure.storage.sqlite.catalog_store import SQLiteCatalogStore
from billing.infrastructure.storage.sqlite.client_store import SQLiteClientStore
from billing.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from billing.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore

# Singleton instances
_catalog_store: SQLiteCatalogStore | None = None
_client_store: SQLiteClientStore | None = None
_invoice_store: SQLiteInvoiceStore | None = None


async def get_catalog_store() -> SQLiteCatalogStore:
    """Get singleton catalog store instance."""
    global _catalog_store
    if _catalog_store is None:
        _catalog_store = SQLiteCatalogStore()
    return _catalog_store


async def get_client_store() -> SQLiteClientStore:
    """Get singleton client store instance."""
    global _client_store
    if _client_store is None:
        _client_store = SQLiteClientStore()
    return _client_store


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore()
    return _invoice_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteCatalogStore",
    "SQLiteClientStore",
    "SQLiteInvoiceStore",
    # Factory functions
    "get_catalog_store",
    "get_client_store",
    "get_invoice_store",
]

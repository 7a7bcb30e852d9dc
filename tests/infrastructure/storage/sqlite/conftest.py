"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

import billing.infrastructure.storage.sqlite.connection as conn_module
from billing.core.entities import Branch, Category, Client, Company, Subcategory
from billing.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteClientStore,
    SQLiteInvoiceStore,
)
from billing.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test_billing.db"


@pytest.fixture
async def billing_db(temp_db_path: Path) -> AsyncGenerator[Path, None]:
    """Migrated temporary database wired into the global connection pool."""
    await initialize_database(temp_db_path, create_backup_before=False)

    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = temp_db_path
    mock_settings.storage.pool_size = 2
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await conn_module.close_pool()


@pytest.fixture
def catalog_store(billing_db) -> SQLiteCatalogStore:
    return SQLiteCatalogStore()


@pytest.fixture
def client_store(billing_db) -> SQLiteClientStore:
    return SQLiteClientStore()


@pytest.fixture
def invoice_store(billing_db) -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore()


@pytest.fixture
async def company(catalog_store) -> Company:
    return await catalog_store.create_company(
        Company(name="Glow Salons", gst_number="29ABCDE1234F1Z5")
    )


@pytest.fixture
async def branch(catalog_store, company) -> Branch:
    return await catalog_store.create_branch(
        Branch(
            company_id=company.id,
            name="Downtown",
            categories=[
                Category(
                    name="Haircut",
                    subcategories=[
                        Subcategory(name="Men", price=150, gst=18),
                        Subcategory(name="Women", price=250, gst=18),
                    ],
                ),
                Category(name="Spa", subcategories=[Subcategory(name="Massage", price=1000, gst=5)]),
            ],
        )
    )


@pytest.fixture
async def client(client_store, company, branch) -> Client:
    return await client_store.create_client(
        Client(
            company_id=company.id,
            branch_id=branch.id,
            name="Asha",
            email="asha@example.com",
            is_regular=True,
            discount_percentage=10,
        )
    )

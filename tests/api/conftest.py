"""Fixtures for API tests: the real app with mocked stores."""

from collections.abc import Callable
from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from billing.api.dependencies import (
    get_catalog,
    get_client_portfolio_use_case,
    get_clients,
    get_invoices,
    get_revenue_report_use_case,
)
from billing.api.main import app
from billing.application.use_cases import (
    GenerateRevenueReportUseCase,
    GetClientPortfolioUseCase,
)
from billing.core.entities import Branch, Client, Company, Invoice


@pytest.fixture
def company() -> Company:
    return Company(
        id=1,
        name="Glow Salons",
        gst_number="29ABCDE1234F1Z5",
        created_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def catalog_mock(company: Company, salon_branch: Branch) -> AsyncMock:
    store = AsyncMock()

    async def get_company(company_id):
        return company if company_id == company.id else None

    async def get_branch(branch_id, company_id=None):
        if branch_id == salon_branch.id and company_id in (None, salon_branch.company_id):
            return salon_branch.model_copy(deep=True)
        return None

    store.get_company.side_effect = get_company
    store.get_branch.side_effect = get_branch
    store.list_branches.return_value = [salon_branch]
    return store


@pytest.fixture
def clients_mock(regular_client: Client, walk_in_client: Client) -> AsyncMock:
    clients = {c.id: c for c in (regular_client, walk_in_client)}
    store = AsyncMock()

    async def get_client(client_id, company_id=None):
        client = clients.get(client_id)
        if client is None or company_id not in (None, client.company_id):
            return None
        return client

    store.get_client.side_effect = get_client
    store.list_clients.return_value = list(clients.values())
    return store


@pytest.fixture
def invoices_mock() -> AsyncMock:
    store = AsyncMock()

    async def create_invoice(invoice: Invoice, allocate: Callable[[int], str]) -> Invoice:
        invoice.id = 1
        invoice.invoice_number = allocate(0)
        return invoice

    store.create_invoice.side_effect = create_invoice
    store.list_invoices.return_value = []
    store.get_invoice.return_value = None
    return store


@pytest.fixture
async def api_client(catalog_mock, clients_mock, invoices_mock, now):
    """HTTP client against the app; report clocks are pinned to the test "now"."""
    app.dependency_overrides[get_catalog] = lambda: catalog_mock
    app.dependency_overrides[get_clients] = lambda: clients_mock
    app.dependency_overrides[get_invoices] = lambda: invoices_mock
    app.dependency_overrides[get_revenue_report_use_case] = lambda: GenerateRevenueReportUseCase(
        catalog_store=catalog_mock,
        client_store=clients_mock,
        invoice_store=invoices_mock,
        clock=lambda: now,
    )
    app.dependency_overrides[get_client_portfolio_use_case] = lambda: GetClientPortfolioUseCase(
        catalog_store=catalog_mock,
        client_store=clients_mock,
        invoice_store=invoices_mock,
        clock=lambda: now,
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

"""API tests for revenue, client portfolio and sales reports."""

from datetime import datetime

import pytest
from httpx import AsyncClient

from billing.core.entities import ClientType
from billing.core.exceptions import DatabaseError


@pytest.fixture
def branch_invoices(invoices_mock, make_invoice, make_item, regular_client, walk_in_client):
    """Asha's haircut today and Ravi's massage yesterday."""
    invoices = [
        make_invoice(
            walk_in_client,
            datetime(2024, 5, 14, 12, 0),
            1050.0,
            items=[make_item(20, 200, 1050.0, name="Massage")],
        ),
        make_invoice(
            regular_client,
            datetime(2024, 5, 15, 10, 0),
            318.6,
            items=[make_item(10, 100, 318.6, quantity=2, unit_price=150.0, name="Men")],
        ),
    ]
    invoices_mock.list_invoices.return_value = invoices
    return invoices


class TestRevenueReport:
    async def test_last_7_days(self, api_client: AsyncClient, branch_invoices):
        response = await api_client.get(
            "/api/companies/1/branches/1/report", params={"dateRange": "7d"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["totalRevenue"] == 1368.6
        assert data["summary"]["totalInvoices"] == 2
        assert data["summary"]["totalDays"] == 8
        assert data["periods"][0]["revenue"] == 318.6
        assert data["periods"][1]["revenue"] == 1050.0
        assert data["clientInsights"]["regularClients"] == 1
        assert data["clientInsights"]["totalClients"] == 2
        assert data["topClients"][0]["name"] == "Ravi"
        assert data["topSubcategories"][0]["name"] == "Massage"
        assert "Promote top subcategory: Massage" in data["recommendations"]
        assert data["recommendations"][0].startswith("Focus on regular clients")
        assert data["filters"]["dateRange"] == "7d"

    async def test_regular_filter_reaches_stores(
        self, api_client: AsyncClient, branch_invoices, invoices_mock, clients_mock
    ):
        response = await api_client.get(
            "/api/companies/1/branches/1/report", params={"clientType": "regular"}
        )

        assert response.status_code == 200
        query = invoices_mock.list_invoices.call_args.args[0]
        assert query.client_type is ClientType.REGULAR
        assert query.branch_id == 1
        assert clients_mock.list_clients.call_args.kwargs["is_regular"] is True

    async def test_store_failure_degrades_to_empty_report(self, api_client: AsyncClient, invoices_mock):
        invoices_mock.list_invoices.side_effect = DatabaseError("list_invoices", "disk I/O error")

        response = await api_client.get("/api/companies/1/branches/1/report")

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["totalRevenue"] == 0
        assert data["topClients"] == []

    async def test_unknown_client_type(self, api_client: AsyncClient):
        response = await api_client.get(
            "/api/companies/1/branches/1/report", params={"clientType": "vip"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    async def test_half_open_custom_range(self, api_client: AsyncClient):
        response = await api_client.get(
            "/api/companies/1/branches/1/report", params={"startDate": "2024-05-01"}
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "INVALID_DATE_RANGE"

    async def test_unknown_branch(self, api_client: AsyncClient):
        response = await api_client.get("/api/companies/1/branches/9/report")

        assert response.status_code == 404


class TestClientPortfolio:
    async def test_all_time_portfolio(self, api_client: AsyncClient, branch_invoices, invoices_mock):
        response = await api_client.get(
            "/api/companies/1/branches/1/client-portfolio", params={"dateRange": "all"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["summary"]["totalClients"] == 2
        assert data["summary"]["regularClients"] == 1
        assert data["summary"]["totalRevenue"] == 1368.6
        assert data["summary"]["revenueFromRegular"] == 318.6
        assert data["topClients"][0]["name"] == "Ravi"
        assert invoices_mock.list_invoices.call_args.args[0].start is None

    async def test_invalid_date_range(self, api_client: AsyncClient):
        response = await api_client.get(
            "/api/companies/1/branches/1/client-portfolio", params={"dateRange": "1y"}
        )

        assert response.status_code == 422


class TestSalesReport:
    async def test_daily_and_product_totals(self, api_client: AsyncClient, branch_invoices, invoices_mock):
        response = await api_client.get(
            "/api/companies/1/reports/sales",
            params={"startDate": "2024-05-14", "endDate": "2024-05-15"},
        )

        assert response.status_code == 200
        data = response.json()
        assert [d["date"] for d in data["salesReport"]] == ["2024-05-14", "2024-05-15"]
        assert data["summary"]["totalInvoices"] == 2
        assert data["summary"]["totalAmount"] == 1368.6
        assert {p["productName"] for p in data["productReport"]} == {"Massage", "Men"}
        assert invoices_mock.list_invoices.call_args.args[0].company_id == 1

    async def test_unknown_company(self, api_client: AsyncClient):
        response = await api_client.get("/api/companies/2/reports/sales")

        assert response.status_code == 404
        assert response.json()["error_code"] == "COMPANY_NOT_FOUND"

    async def test_inverted_range(self, api_client: AsyncClient):
        response = await api_client.get(
            "/api/companies/1/reports/sales",
            params={"startDate": "2024-05-15", "endDate": "2024-05-01"},
        )

        assert response.status_code == 400

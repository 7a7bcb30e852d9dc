"""Integration test for the billing flow.

Tests the full flow against a migrated database: set up catalog and
clients, issue invoices, report on them, then update and delete.
"""

from datetime import date
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

import billing.infrastructure.storage.sqlite.connection as conn_module
from billing.api.dependencies import get_catalog, get_clients, get_invoices
from billing.api.main import app
from billing.infrastructure.storage.sqlite import (
    SQLiteCatalogStore,
    SQLiteClientStore,
    SQLiteInvoiceStore,
)
from billing.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def live_client(tmp_path: Path):
    """API client backed by a fresh SQLite database."""
    db_path = tmp_path / "billing_flow.db"
    await initialize_database(db_path, create_backup_before=False)

    conn_module._pool = None
    settings = MagicMock()
    settings.storage.db_path = db_path
    settings.storage.pool_size = 2
    settings.storage.busy_timeout = 5000

    catalog, clients, invoices = SQLiteCatalogStore(), SQLiteClientStore(), SQLiteInvoiceStore()
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_clients] = lambda: clients
    app.dependency_overrides[get_invoices] = lambda: invoices

    with patch.object(conn_module, "get_settings", return_value=settings):
        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()
            await conn_module.close_pool()


async def _setup_branch(client: AsyncClient) -> dict:
    company = (
        await client.post(
            "/api/companies", json={"name": "Glow Salons", "gstNumber": "29ABCDE1234F1Z5"}
        )
    ).json()
    branch = (
        await client.post(
            f"/api/companies/{company['id']}/branches",
            json={
                "name": "Downtown",
                "categories": [
                    {"name": "Haircut", "subcategories": [{"name": "Men", "price": 150, "gst": 18}]},
                    {"name": "Spa", "subcategories": [{"name": "Massage", "price": 1000, "gst": 5}]},
                ],
            },
        )
    ).json()
    asha = (
        await client.post(
            f"/api/companies/{company['id']}/clients",
            json={"name": "Asha", "isRegular": True, "discountPercentage": 10},
        )
    ).json()
    ravi = (
        await client.post(f"/api/companies/{company['id']}/clients", json={"name": "Ravi"})
    ).json()

    haircut, spa = branch["categories"]
    return {
        "company": company["id"],
        "branch": branch["id"],
        "asha": asha["id"],
        "ravi": ravi["id"],
        "men": {"categoryId": haircut["id"], "subcategoryId": haircut["subcategories"][0]["id"]},
        "massage": {"categoryId": spa["id"], "subcategoryId": spa["subcategories"][0]["id"]},
    }


class TestBillingFlow:
    async def test_invoice_report_and_lifecycle(self, live_client: AsyncClient):
        ids = await _setup_branch(live_client)
        base = f"/api/companies/{ids['company']}/branches/{ids['branch']}"

        first = await live_client.post(
            f"{base}/invoices",
            json={"clientId": ids["asha"], "items": [{**ids["men"], "quantity": 2}]},
        )
        second = await live_client.post(
            f"{base}/invoices",
            json={"clientId": ids["ravi"], "items": [{**ids["massage"], "quantity": "1"}]},
        )
        assert first.status_code == 201
        assert second.status_code == 201
        assert first.json()["invoiceNumber"] == "DOW-00001"
        assert first.json()["grandTotal"] == 318.6
        assert second.json()["invoiceNumber"] == "DOW-00002"
        assert second.json()["grandTotal"] == 1050.0

        report = (await live_client.get(f"{base}/report", params={"dateRange": "7d"})).json()
        assert report["summary"]["totalRevenue"] == 1368.6
        assert report["summary"]["totalInvoices"] == 2
        assert report["periods"][0]["revenue"] == 1368.6
        assert report["topSubcategories"][0]["name"] == "Massage"
        assert report["topClients"][0]["name"] == "Ravi"

        portfolio = (
            await live_client.get(f"{base}/client-portfolio", params={"clientType": "regular"})
        ).json()
        assert portfolio["summary"]["totalClients"] == 1
        assert portfolio["summary"]["totalRevenue"] == 318.6

        invoice_id = first.json()["id"]
        paid = await live_client.patch(
            f"{base}/invoices/{invoice_id}", json={"paymentStatus": "paid", "paymentMethod": "upi"}
        )
        assert paid.json()["paymentStatus"] == "paid"
        assert paid.json()["grandTotal"] == 318.6

        sales = (await live_client.get(f"/api/companies/{ids['company']}/reports/sales")).json()
        assert sales["summary"]["paidInvoices"] == 1
        assert sales["summary"]["pendingInvoices"] == 1

        assert (await live_client.delete(f"{base}/invoices/{invoice_id}")).status_code == 204
        assert (await live_client.get(f"{base}/invoices/{invoice_id}")).status_code == 404

        third = await live_client.post(
            f"{base}/invoices",
            json={"clientId": ids["ravi"], "items": [ids["men"]]},
        )
        assert third.json()["invoiceNumber"] == "DOW-00003"

        listed = (await live_client.get(f"{base}/invoices")).json()
        assert [i["invoiceNumber"] for i in listed["invoices"]] == ["DOW-00002", "DOW-00003"]

    async def test_utc_dated_invoice_reports(self, live_client: AsyncClient):
        ids = await _setup_branch(live_client)
        base = f"/api/companies/{ids['company']}/branches/{ids['branch']}"

        created = await live_client.post(
            f"{base}/invoices",
            json={
                "clientId": ids["ravi"],
                "date": f"{date.today().isoformat()}T01:00:00Z",
                "items": [ids["men"]],
            },
        )
        assert created.status_code == 201

        report = await live_client.get(f"{base}/report", params={"dateRange": "7d"})
        assert report.status_code == 200
        assert report.json()["summary"]["totalInvoices"] == 1

        portfolio = await live_client.get(f"{base}/client-portfolio")
        assert portfolio.status_code == 200
        assert portfolio.json()["summary"]["totalRevenue"] == 177.0

    async def test_deleted_catalog_blocks_new_invoices(self, live_client: AsyncClient):
        ids = await _setup_branch(live_client)
        base = f"/api/companies/{ids['company']}/branches/{ids['branch']}"

        deleted = await live_client.delete(f"{base}/categories/{ids['massage']['categoryId']}")
        assert deleted.status_code == 204

        response = await live_client.post(
            f"{base}/invoices",
            json={"clientId": ids["ravi"], "items": [ids["men"], ids["massage"]]},
        )
        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"

        branch = (await live_client.get(base)).json()
        assert [c["name"] for c in branch["categories"]] == ["Haircut"]
        assert (await live_client.get(f"{base}/invoices")).json()["total"] == 0

    async def test_database_health(self, live_client: AsyncClient):
        response = await live_client.get("/api/health/db")

        assert response.json()["status"] == "healthy"
        assert response.json()["database"]["available"] is True

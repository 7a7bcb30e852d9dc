"""Tests for CreateInvoiceUseCase."""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from billing.application.dto.requests import CreateInvoiceRequest, InvoiceItemRequest
from billing.application.use_cases.create_invoice import CreateInvoiceUseCase
from billing.config import BillingSettings
from billing.core.entities import ClientType, Company
from billing.core.exceptions import (
    BranchNotFoundError,
    ClientNotFoundError,
    CompanyNotFoundError,
    EmptyInvoiceError,
    InvalidQuantityError,
    SubcategoryNotFoundError,
)


@pytest.fixture
def mock_catalog_store(salon_branch):
    store = AsyncMock()
    store.get_company.return_value = Company(id=1, name="Glow", gst_number="29ABCDE1234F1Z5")
    store.get_branch.return_value = salon_branch
    return store


@pytest.fixture
def mock_client_store(walk_in_client):
    store = AsyncMock()
    store.get_client.return_value = walk_in_client
    return store


@pytest.fixture
def mock_invoice_store():
    store = AsyncMock()
    existing = {"count": 0}

    async def create(invoice, allocate):
        invoice.invoice_number = allocate(existing["count"])
        invoice.id = existing["count"] + 1
        existing["count"] += 1
        return invoice

    store.create_invoice.side_effect = create
    return store


@pytest.fixture
def use_case(mock_catalog_store, mock_client_store, mock_invoice_store):
    return CreateInvoiceUseCase(
        catalog_store=mock_catalog_store,
        client_store=mock_client_store,
        invoice_store=mock_invoice_store,
        billing_settings=BillingSettings(),
    )


def _request(*items: InvoiceItemRequest, **kwargs) -> CreateInvoiceRequest:
    return CreateInvoiceRequest(client_id=2, items=list(items), **kwargs)


class TestCreateInvoiceUseCase:
    async def test_absolute_amounts_invoice(self, use_case, mock_invoice_store):
        request = _request(
            InvoiceItemRequest(
                category_id=10,
                subcategory_id=100,
                unit_price=100,
                quantity=2,
                discount_amount=10,
                gst_amount=18,
            )
        )

        result = await use_case.execute(1, 1, request)

        invoice = result.invoice
        assert invoice.invoice_number == "DOW-00001"
        assert invoice.subtotal == 200
        assert invoice.total_discount == 10
        assert invoice.total_gst == 18
        assert invoice.grand_total == 208
        mock_invoice_store.create_invoice.assert_awaited_once()

    async def test_numbers_follow_branch_count(self, use_case):
        item = InvoiceItemRequest(category_id=10, subcategory_id=100)

        first = await use_case.execute(1, 1, _request(item))
        second = await use_case.execute(1, 1, _request(item))

        assert first.invoice.invoice_number == "DOW-00001"
        assert second.invoice.invoice_number == "DOW-00002"

    async def test_client_snapshot_and_type(self, use_case, mock_client_store, regular_client):
        mock_client_store.get_client.return_value = regular_client

        result = await use_case.execute(
            1, 1, _request(InvoiceItemRequest(category_id=10, subcategory_id=101))
        )

        invoice = result.invoice
        assert invoice.client_id == 1
        assert invoice.client_snapshot.name == "Asha"
        assert invoice.client_type is ClientType.REGULAR
        assert invoice.company_gst == "29ABCDE1234F1Z5"
        # 250 - 10% = 225, GST 18% of 225 = 40.5
        assert invoice.items[0].discount_amount == 25
        assert invoice.grand_total == 265.5

    async def test_request_metadata_carried(self, use_case):
        when = datetime(2024, 5, 1, 10, 0)
        request = _request(
            InvoiceItemRequest(category_id=20, subcategory_id=200),
            date=when,
            notes="Paid at counter",
            payment_status="paid",
            payment_method="upi",
        )

        invoice = (await use_case.execute(1, 1, request)).invoice

        assert invoice.date == when
        assert invoice.notes == "Paid at counter"
        assert invoice.payment_status.value == "paid"
        assert invoice.payment_method.value == "upi"

    async def test_company_not_found(self, use_case, mock_catalog_store, mock_invoice_store):
        mock_catalog_store.get_company.return_value = None
        with pytest.raises(CompanyNotFoundError):
            await use_case.execute(1, 1, _request(InvoiceItemRequest(category_id=10, subcategory_id=100)))
        mock_invoice_store.create_invoice.assert_not_awaited()

    async def test_branch_scoped_to_company(self, use_case, mock_catalog_store):
        mock_catalog_store.get_branch.return_value = None
        with pytest.raises(BranchNotFoundError):
            await use_case.execute(1, 5, _request(InvoiceItemRequest(category_id=10, subcategory_id=100)))
        mock_catalog_store.get_branch.assert_awaited_once_with(5, company_id=1)

    async def test_client_not_found(self, use_case, mock_client_store):
        mock_client_store.get_client.return_value = None
        with pytest.raises(ClientNotFoundError):
            await use_case.execute(1, 1, _request(InvoiceItemRequest(category_id=10, subcategory_id=100)))

    async def test_empty_items_rejected(self, use_case, mock_invoice_store):
        with pytest.raises(EmptyInvoiceError):
            await use_case.execute(1, 1, _request())
        mock_invoice_store.create_invoice.assert_not_awaited()

    async def test_one_bad_line_aborts_invoice(self, use_case, mock_invoice_store):
        request = _request(
            InvoiceItemRequest(category_id=10, subcategory_id=100),
            InvoiceItemRequest(category_id=10, subcategory_id=102),
        )
        with pytest.raises(SubcategoryNotFoundError):
            await use_case.execute(1, 1, request)
        mock_invoice_store.create_invoice.assert_not_awaited()

    async def test_negative_quantity_aborts_invoice(self, use_case, mock_invoice_store):
        request = _request(InvoiceItemRequest(category_id=10, subcategory_id=100, quantity=-1))
        with pytest.raises(InvalidQuantityError):
            await use_case.execute(1, 1, request)
        mock_invoice_store.create_invoice.assert_not_awaited()

    async def test_to_response(self, use_case):
        result = await use_case.execute(
            1, 1, _request(InvoiceItemRequest(category_id=10, subcategory_id=100, quantity=2))
        )

        response = use_case.to_response(result)
        data = response.model_dump(by_alias=True)

        assert data["invoiceNumber"] == "DOW-00001"
        assert data["clientId"] == 2
        assert data["client"]["name"] == "Ravi"
        assert data["clientType"] == "non-regular"
        assert data["items"][0]["quantity"] == 2
        assert data["grandTotal"] == 354

"""Tests for SQLite invoice store."""

import asyncio
from datetime import date, datetime

import pytest

from billing.core.entities import (
    ClientRef,
    ClientType,
    Invoice,
    InvoiceFilter,
    InvoiceUpdate,
    PaymentMethod,
    PaymentStatus,
    PricedLineItem,
)
from billing.core.exceptions import InvoiceNumberConflictError
from billing.core.services.invoice_numbering import InvoiceNumberAllocator


@pytest.fixture
def allocate(branch):
    return InvoiceNumberAllocator().for_branch(branch.name)


@pytest.fixture
def new_invoice(branch, client):
    """Builds an unsaved invoice for the Downtown branch."""
    haircut = branch.categories[0]

    def _new(when: datetime = datetime(2024, 5, 15, 10, 0), grand_total: float = 354.0) -> Invoice:
        return Invoice(
            date=when,
            company_id=branch.company_id,
            branch_id=branch.id,
            client_ref=ClientRef(id=client.id),
            client_snapshot=client.snapshot(),
            client_type=ClientType.REGULAR,
            company_gst="29ABCDE1234F1Z5",
            items=[
                PricedLineItem(
                    category_id=haircut.id,
                    subcategory_id=haircut.subcategories[0].id,
                    category_name="Haircut",
                    subcategory_name="Men",
                    name="Men",
                    quantity=2,
                    unit_price=150,
                    discount_percentage=10,
                    discount_amount=30,
                    gst_rate=18,
                    gst_amount=48.6,
                    final_amount=318.6,
                ),
                PricedLineItem(
                    category_id=haircut.id,
                    subcategory_id=haircut.subcategories[1].id,
                    name="Women",
                    unit_price=35.4,
                    final_amount=35.4,
                ),
            ],
            subtotal=335.4,
            total_discount=30,
            total_gst=48.6,
            grand_total=grand_total,
            due_date=date(2024, 6, 15),
        )

    return _new


class TestCreateInvoice:
    async def test_create_and_get(self, invoice_store, new_invoice, allocate):
        created = await invoice_store.create_invoice(new_invoice(), allocate)

        assert created.id is not None
        assert created.invoice_number == "DOW-00001"

        loaded = await invoice_store.get_invoice(created.id)
        assert loaded.invoice_number == "DOW-00001"
        assert loaded.date == datetime(2024, 5, 15, 10, 0)
        assert loaded.client_id == created.client_id
        assert loaded.client_snapshot.name == "Asha"
        assert loaded.client_snapshot.is_regular is True
        assert loaded.client_type is ClientType.REGULAR
        assert loaded.grand_total == 354.0
        assert loaded.due_date == date(2024, 6, 15)
        assert [i.name for i in loaded.items] == ["Men", "Women"]
        assert loaded.items[0].quantity == 2
        assert loaded.items[0].final_amount == 318.6
        assert loaded.items[0].category_name == "Haircut"

    async def test_sequential_numbers(self, invoice_store, new_invoice, allocate):
        numbers = [
            (await invoice_store.create_invoice(new_invoice(), allocate)).invoice_number
            for _ in range(3)
        ]
        assert numbers == ["DOW-00001", "DOW-00002", "DOW-00003"]

    async def test_concurrent_creation_never_repeats_numbers(self, invoice_store, new_invoice, allocate):
        created = await asyncio.gather(
            *(invoice_store.create_invoice(new_invoice(), allocate) for _ in range(5))
        )

        numbers = sorted(inv.invoice_number for inv in created)
        assert numbers == [f"DOW-{n:05d}" for n in range(1, 6)]

    async def test_deleted_invoices_still_count(self, invoice_store, new_invoice, allocate):
        first = await invoice_store.create_invoice(new_invoice(), allocate)
        await invoice_store.soft_delete_invoice(first.id)

        second = await invoice_store.create_invoice(new_invoice(), allocate)

        assert second.invoice_number == "DOW-00002"
        assert await invoice_store.count_invoices(first.branch_id) == 2

    async def test_duplicate_number_conflict(self, invoice_store, new_invoice):
        await invoice_store.create_invoice(new_invoice(), lambda count: "DOW-00001")

        with pytest.raises(InvoiceNumberConflictError):
            await invoice_store.create_invoice(new_invoice(), lambda count: "DOW-00001")

        assert await invoice_store.count_invoices(new_invoice().branch_id) == 1


class TestListInvoices:
    async def test_date_range_inclusive(self, invoice_store, new_invoice, allocate, branch):
        await invoice_store.create_invoice(new_invoice(datetime(2024, 5, 14, 23, 59, 59, 999000)), allocate)
        await invoice_store.create_invoice(new_invoice(datetime(2024, 5, 15, 0, 0)), allocate)
        await invoice_store.create_invoice(new_invoice(datetime(2024, 5, 16, 0, 0)), allocate)

        invoices = await invoice_store.list_invoices(
            InvoiceFilter(
                branch_id=branch.id,
                start=datetime(2024, 5, 14),
                end=datetime(2024, 5, 15, 23, 59, 59, 999000),
            )
        )

        assert [i.invoice_number for i in invoices] == ["DOW-00001", "DOW-00002"]
        assert all(len(i.items) == 2 for i in invoices)

    async def test_filters(self, invoice_store, new_invoice, allocate, branch, client):
        paid = await invoice_store.create_invoice(new_invoice(), allocate)
        await invoice_store.update_invoice(paid.id, InvoiceUpdate(payment_status=PaymentStatus.PAID))
        deleted = await invoice_store.create_invoice(new_invoice(), allocate)
        await invoice_store.soft_delete_invoice(deleted.id)
        await invoice_store.create_invoice(new_invoice(), allocate)

        live = await invoice_store.list_invoices(InvoiceFilter(branch_id=branch.id))
        assert len(live) == 2

        everything = await invoice_store.list_invoices(
            InvoiceFilter(branch_id=branch.id, exclude_deleted=False)
        )
        assert len(everything) == 3

        only_paid = await invoice_store.list_invoices(
            InvoiceFilter(company_id=branch.company_id, payment_status=PaymentStatus.PAID)
        )
        assert [i.id for i in only_paid] == [paid.id]

        by_type = await invoice_store.list_invoices(
            InvoiceFilter(branch_id=branch.id, client_type=ClientType.NON_REGULAR)
        )
        assert by_type == []

        assert await invoice_store.list_invoices(InvoiceFilter(client_ids=[])) == []
        assert len(await invoice_store.list_invoices(InvoiceFilter(client_ids=[client.id]))) == 2

    async def test_pagination(self, invoice_store, new_invoice, allocate, branch):
        for day in range(1, 6):
            await invoice_store.create_invoice(new_invoice(datetime(2024, 5, day)), allocate)

        page = await invoice_store.list_invoices(
            InvoiceFilter(branch_id=branch.id, limit=2, offset=2)
        )

        assert [i.date.day for i in page] == [3, 4]


class TestUpdateAndDelete:
    async def test_update_payment_fields(self, invoice_store, new_invoice, allocate):
        created = await invoice_store.create_invoice(new_invoice(), allocate)

        updated = await invoice_store.update_invoice(
            created.id,
            InvoiceUpdate(
                payment_status=PaymentStatus.PARTIALLY_PAID,
                payment_method=PaymentMethod.CARD,
                notes="Half paid",
            ),
        )

        assert updated.payment_status is PaymentStatus.PARTIALLY_PAID
        assert updated.payment_method is PaymentMethod.CARD
        assert updated.notes == "Half paid"
        assert updated.grand_total == created.grand_total
        assert updated.due_date == date(2024, 6, 15)

    async def test_update_missing(self, invoice_store):
        assert await invoice_store.update_invoice(999, InvoiceUpdate(notes="x")) is None

    async def test_soft_delete_hides_invoice(self, invoice_store, new_invoice, allocate):
        created = await invoice_store.create_invoice(new_invoice(), allocate)

        assert await invoice_store.soft_delete_invoice(created.id) is True
        assert await invoice_store.get_invoice(created.id) is None
        assert await invoice_store.soft_delete_invoice(created.id) is False

    async def test_get_scoped_to_branch(self, invoice_store, new_invoice, allocate, branch):
        created = await invoice_store.create_invoice(new_invoice(), allocate)
        assert await invoice_store.get_invoice(created.id, branch_id=branch.id) is not None
        assert await invoice_store.get_invoice(created.id, branch_id=branch.id + 1) is None

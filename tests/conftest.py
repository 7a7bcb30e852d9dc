"""Pytest configuration and shared fixtures."""

from collections.abc import Callable
from datetime import datetime

import pytest

from billing.core.entities import (
    Branch,
    Category,
    Client,
    ClientRef,
    ClientType,
    Invoice,
    PricedLineItem,
    Subcategory,
)

# Fixed "now" for report tests: Wednesday, 15 May 2024
NOW = datetime(2024, 5, 15, 14, 30)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def salon_branch() -> Branch:
    """Branch "Downtown" with a Haircut and a Spa category, one deleted entry each."""
    return Branch(
        id=1,
        company_id=1,
        name="Downtown",
        categories=[
            Category(
                id=10,
                branch_id=1,
                name="Haircut",
                subcategories=[
                    Subcategory(id=100, category_id=10, name="Men", price=150.0, gst=18.0),
                    Subcategory(id=101, category_id=10, name="Women", price=250.0, gst=18.0),
                    Subcategory(
                        id=102,
                        category_id=10,
                        name="Kids",
                        price=80.0,
                        deleted_at=datetime(2024, 1, 1),
                    ),
                ],
            ),
            Category(
                id=20,
                branch_id=1,
                name="Spa",
                subcategories=[
                    Subcategory(id=200, category_id=20, name="Massage", price=1000.0, gst=5.0),
                ],
            ),
            Category(
                id=30,
                branch_id=1,
                name="Retired",
                deleted_at=datetime(2024, 1, 1),
                subcategories=[
                    Subcategory(id=300, category_id=30, name="Perm", price=500.0),
                ],
            ),
        ],
    )


@pytest.fixture
def regular_client() -> Client:
    return Client(id=1, company_id=1, name="Asha", is_regular=True, discount_percentage=10.0)


@pytest.fixture
def walk_in_client() -> Client:
    return Client(id=2, company_id=1, name="Ravi")


@pytest.fixture
def make_invoice() -> Callable[..., Invoice]:
    """Factory for persisted-looking invoices."""
    counter = {"id": 0}

    def _make(
        client: Client,
        date: datetime,
        grand_total: float,
        items: list[PricedLineItem] | None = None,
        branch_id: int = 1,
        **kwargs,
    ) -> Invoice:
        counter["id"] += 1
        return Invoice(
            id=counter["id"],
            invoice_number=f"DOW-{counter['id']:05d}",
            date=date,
            company_id=client.company_id,
            branch_id=branch_id,
            client_ref=ClientRef(id=client.id),
            client_snapshot=client.snapshot(),
            client_type=ClientType.for_client(client.is_regular),
            items=items or [],
            grand_total=grand_total,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_item() -> Callable[..., PricedLineItem]:
    """Factory for priced line items."""

    def _make(
        category_id: int,
        subcategory_id: int,
        final_amount: float | None,
        quantity: int = 1,
        unit_price: float | None = None,
        name: str = "Item",
    ) -> PricedLineItem:
        return PricedLineItem(
            category_id=category_id,
            subcategory_id=subcategory_id,
            name=name,
            quantity=quantity,
            unit_price=unit_price if unit_price is not None else (final_amount or 0.0),
            final_amount=final_amount,
        )

    return _make

"""Invoice domain entities."""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from billing.core.entities.client import ClientRef, ClientSnapshot
from billing.core.exceptions import ValidationError


def local_naive(value: dt.datetime) -> dt.datetime:
    """Offset-aware moments become naive local time; naive ones pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class PaymentStatus(str, Enum):
    """Invoice payment state."""

    PENDING = "pending"
    PAID = "paid"
    PARTIALLY_PAID = "partially_paid"


class PaymentMethod(str, Enum):
    """How the invoice is (to be) paid."""

    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    BANK_TRANSFER = "bank_transfer"
    CREDIT = "credit"


class ClientType(str, Enum):
    """Client segment recorded on the invoice at creation."""

    REGULAR = "regular"
    NON_REGULAR = "non-regular"

    @classmethod
    def for_client(cls, is_regular: bool) -> "ClientType":
        return cls.REGULAR if is_regular else cls.NON_REGULAR

    @classmethod
    def from_filter(cls, value: str | None) -> "ClientType | None":
        """Parse a report filter; "all" or empty selects every client."""
        if not value or value == "all":
            return None
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                field="clientType",
                message="Must be one of: all, regular, non-regular",
                value=value,
            ) from None

    @property
    def is_regular(self) -> bool:
        return self is ClientType.REGULAR


class LineItemRequest(BaseModel):
    """
    A requested invoice line before pricing.

    Populating discount_amount/gst_amount selects absolute-amount pricing
    for that component; otherwise it is derived from the percentages.
    """

    category_id: int
    subcategory_id: int
    quantity: Any = None
    name: str | None = None
    description: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    discount_percentage: float | None = Field(default=None, ge=0, le=100)
    discount_amount: float | None = None
    gst_percentage: float | None = Field(default=None, ge=0)
    gst_amount: float | None = None


class PricedLineItem(BaseModel):
    """
    A priced invoice line.

    final_amount = unit_price * quantity - discount_amount + gst_amount.
    Stored items are never repriced; final_amount may be missing on
    records written by older versions.
    """

    id: int | None = None
    invoice_id: int | None = None
    category_id: int
    subcategory_id: int
    category_name: str = ""
    subcategory_name: str = ""
    name: str
    description: str = ""
    quantity: int = 1
    unit_price: float
    discount_percentage: float = 0.0
    discount_amount: float = 0.0
    gst_rate: float = 0.0
    gst_amount: float = 0.0
    final_amount: float | None = None

    @property
    def gross_amount(self) -> float:
        return self.unit_price * self.quantity


class Invoice(BaseModel):
    """
    An issued invoice.

    The client snapshot and line items are frozen at creation; only the
    payment fields, notes and due date change afterwards.
    """

    id: int | None = None
    invoice_number: str = ""
    date: dt.datetime = Field(default_factory=dt.datetime.now)
    company_id: int
    branch_id: int
    client_ref: ClientRef
    client_snapshot: ClientSnapshot
    client_type: ClientType = ClientType.NON_REGULAR
    company_gst: str = ""
    items: list[PricedLineItem] = Field(default_factory=list)

    subtotal: float = 0.0
    total_discount: float = 0.0
    total_gst: float = 0.0
    grand_total: float = 0.0

    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""
    due_date: dt.date | None = None

    deleted_at: dt.datetime | None = None
    created_at: dt.datetime = Field(default_factory=dt.datetime.now)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.now)

    @field_validator("date", "deleted_at", "created_at", "updated_at")
    @classmethod
    def _naive_local(cls, value: dt.datetime | None) -> dt.datetime | None:
        return local_naive(value) if value is not None else None

    @property
    def client_id(self) -> int:
        return self.client_ref.id


class InvoiceFilter(BaseModel):
    """Query for fetching invoices; soft-deleted rows are excluded by default."""

    company_id: int | None = None
    branch_id: int | None = None
    client_ids: list[int] | None = None
    client_type: ClientType | None = None
    payment_status: PaymentStatus | None = None
    start: dt.datetime | None = None
    end: dt.datetime | None = None
    exclude_deleted: bool = True
    limit: int | None = None
    offset: int = 0


class InvoiceUpdate(BaseModel):
    """Mutable invoice fields."""

    payment_status: PaymentStatus | None = None
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    due_date: dt.date | None = None

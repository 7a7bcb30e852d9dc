"""Invoice-level totals over priced line items."""

from collections.abc import Iterable
from dataclasses import dataclass

from billing.core.entities.invoice import PricedLineItem
from billing.core.money import MONEY_PLACES, round_money


@dataclass(frozen=True)
class InvoiceTotals:
    """Invoice totals; grand_total = subtotal - total_discount + total_gst."""

    subtotal: float = 0.0
    total_discount: float = 0.0
    total_gst: float = 0.0
    grand_total: float = 0.0


def aggregate(
    items: Iterable[PricedLineItem], places: int = MONEY_PLACES
) -> InvoiceTotals:
    """Sum priced line items. An empty list yields all-zero totals."""
    subtotal = 0.0
    total_discount = 0.0
    total_gst = 0.0
    for item in items:
        subtotal += item.gross_amount
        total_discount += item.discount_amount
        total_gst += item.gst_amount

    return InvoiceTotals(
        subtotal=round_money(subtotal, places),
        total_discount=round_money(total_discount, places),
        total_gst=round_money(total_gst, places),
        grand_total=round_money(subtotal - total_discount + total_gst, places),
    )

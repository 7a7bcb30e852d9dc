"""
Line item pricing.

Two entry points share one rule set, selected by which request fields are
populated:

- percentage-driven: discount and GST derive from rates
  (max of item override and client standing discount; item or catalog GST
  rate applied to the discounted gross)
- absolute-amount-driven: discount_amount and gst_amount are taken as given

final_amount = unit_price * quantity - discount_amount + gst_amount, never
clamped at zero.
"""

import math
from typing import Any

from billing.core.entities.catalog import CatalogEntry
from billing.core.entities.client import Client
from billing.core.entities.invoice import LineItemRequest, PricedLineItem
from billing.core.exceptions import InvalidQuantityError
from billing.core.money import MONEY_PLACES, percentage_of


def resolve_quantity(raw: Any, index: int | None = None) -> int:
    """
    Normalize a requested quantity.

    Missing, zero and non-integer values default to 1. Integral floats
    ("2.0") are accepted. An explicit negative quantity is rejected.
    """
    if raw is None or isinstance(raw, bool):
        return 1
    if isinstance(raw, str):
        raw = raw.strip()
        try:
            raw = float(raw)
        except ValueError:
            return 1
    if not isinstance(raw, (int, float)):
        return 1
    if isinstance(raw, float) and not math.isfinite(raw):
        return 1
    if raw < 0:
        raise InvalidQuantityError(raw, index=index)
    if raw != int(raw) or raw == 0:
        return 1
    return int(raw)


def effective_discount_percentage(request: LineItemRequest, client: Client) -> float:
    """A regular client's standing discount is a floor for the item override."""
    return max(request.discount_percentage or 0.0, client.standing_discount)


def price(
    entry: CatalogEntry,
    request: LineItemRequest,
    client: Client,
    index: int | None = None,
    places: int = MONEY_PLACES,
) -> PricedLineItem:
    """Price one requested line against its resolved catalog entry."""
    quantity = resolve_quantity(request.quantity, index=index)
    unit_price = entry.unit_price if request.unit_price is None else request.unit_price
    gross = unit_price * quantity

    discount_percentage = effective_discount_percentage(request, client)
    if request.discount_amount is not None:
        discount_amount = request.discount_amount
    else:
        discount_amount = percentage_of(discount_percentage, gross, places)

    gst_rate = entry.gst_rate if request.gst_percentage is None else request.gst_percentage
    if request.gst_amount is not None:
        gst_amount = request.gst_amount
    else:
        gst_amount = percentage_of(gst_rate, gross - discount_amount, places)

    final_amount = gross - discount_amount + gst_amount

    return PricedLineItem(
        category_id=entry.category_id,
        subcategory_id=entry.subcategory_id,
        category_name=entry.category_name,
        subcategory_name=entry.name,
        name=request.name or entry.name,
        description=request.description if request.description is not None else entry.description,
        quantity=quantity,
        unit_price=unit_price,
        discount_percentage=discount_percentage,
        discount_amount=discount_amount,
        gst_rate=gst_rate,
        gst_amount=gst_amount,
        final_amount=final_amount,
    )

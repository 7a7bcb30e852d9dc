"""Per-client price list over a company's live catalogs."""

from collections.abc import Iterable

from billing.core.entities.catalog import Branch
from billing.core.entities.client import Client
from billing.core.entities.report import PriceListEntry
from billing.core.money import MONEY_PLACES, round_money


def discounted_price(price: float, discount_percentage: float, places: int = MONEY_PLACES) -> float:
    return round_money(price * (1 - discount_percentage / 100), places)


def build_price_list(
    branches: Iterable[Branch], client: Client, places: int = MONEY_PLACES
) -> list[PriceListEntry]:
    """Every live subcategory with the client's standing discount applied."""
    discount = client.standing_discount
    entries = []
    for branch in branches:
        for category in branch.live_categories():
            for sub in category.live_subcategories():
                entries.append(
                    PriceListEntry(
                        branch_id=branch.id,
                        branch_name=branch.name,
                        category_id=category.id,
                        category_name=category.name,
                        subcategory_id=sub.id,
                        name=sub.name,
                        description=sub.description,
                        price=sub.price,
                        gst=sub.gst,
                        discount_percentage=discount,
                        discounted_price=discounted_price(sub.price, discount, places)
                        if discount
                        else sub.price,
                    )
                )
    return entries

"""
Client segmentation and ranking.

Partitions clients into regular and non-regular segments, folds invoices
into per-segment and per-client running stats, and ranks clients by spend.
Every ratio is 0 for an empty denominator.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime

from billing.config import get_logger
from billing.core.entities.client import Client
from billing.core.entities.invoice import Invoice
from billing.core.entities.report import ClientStats, SegmentationReport, SegmentStats
from billing.core.money import (
    MONEY_PLACES,
    round_money,
    safe_average,
    to_amount,
    whole_percentage,
)

logger = get_logger(__name__)


def item_count(invoice: Invoice) -> int:
    """Units on an invoice; a missing quantity counts as one."""
    return sum(item.quantity or 1 for item in invoice.items)


def _finish_segment(segment: SegmentStats, total_revenue: float, places: int) -> None:
    segment.avg_invoice_value = round_money(
        safe_average(segment.revenue, segment.invoices), places
    )
    segment.avg_revenue_per_client = round_money(
        safe_average(segment.revenue, segment.count), places
    )
    segment.percentage_of_revenue = whole_percentage(segment.revenue, total_revenue)
    segment.revenue = round_money(segment.revenue, places)


def rank_clients(
    stats: Iterable[ClientStats],
    now: datetime,
    limit: int = 10,
    places: int = MONEY_PLACES,
) -> list[ClientStats]:
    """Top clients by total spend with derived average and recency."""
    ranked = sorted(stats, key=lambda s: s.total_spent, reverse=True)[:limit]
    for entry in ranked:
        entry.avg_spend_per_invoice = round_money(
            safe_average(entry.total_spent, entry.invoice_count), places
        )
        entry.total_spent = round_money(entry.total_spent, places)
        if entry.last_purchase_date is not None:
            entry.days_since_last_purchase = (now - entry.last_purchase_date).days
    return ranked


def segment(
    clients: Sequence[Client],
    invoices: Iterable[Invoice],
    now: datetime,
    top_limit: int = 10,
    places: int = MONEY_PLACES,
) -> SegmentationReport:
    """
    Build a segmentation report.

    Invoices are expected to be pre-filtered by date range and client type.
    Each invoice is attributed using the live client record when it is among
    `clients`, falling back to the snapshot frozen on the invoice.
    """
    by_id = {c.id: c for c in clients}
    regular = SegmentStats(count=sum(1 for c in clients if c.is_regular))
    non_regular = SegmentStats(count=len(clients) - regular.count)
    per_client: dict[int, ClientStats] = {}
    total_items = 0
    total_invoices = 0

    for invoice in invoices:
        client = by_id.get(invoice.client_id)
        is_regular = client.is_regular if client else invoice.client_snapshot.is_regular
        name = client.name if client else invoice.client_snapshot.name
        amount = to_amount(invoice.grand_total)
        items = item_count(invoice)

        bucket = regular if is_regular else non_regular
        bucket.revenue += amount
        bucket.invoices += 1
        bucket.items += items
        total_items += items
        total_invoices += 1

        stats = per_client.get(invoice.client_id)
        if stats is None:
            stats = per_client[invoice.client_id] = ClientStats(
                client_id=invoice.client_id,
                name=name,
                is_regular=is_regular,
                first_purchase_date=invoice.date,
                last_purchase_date=invoice.date,
            )
        stats.total_spent += amount
        stats.invoice_count += 1
        stats.items_purchased += items
        if invoice.date < stats.first_purchase_date:
            stats.first_purchase_date = invoice.date
        if invoice.date > stats.last_purchase_date:
            stats.last_purchase_date = invoice.date

    total_revenue = regular.revenue + non_regular.revenue
    total_clients = len(clients)
    _finish_segment(regular, total_revenue, places)
    _finish_segment(non_regular, total_revenue, places)

    report = SegmentationReport(
        total_clients=total_clients,
        regular_clients=regular.count,
        non_regular_clients=non_regular.count,
        regular_client_percentage=whole_percentage(regular.count, total_clients),
        total_revenue=round_money(total_revenue, places),
        total_invoices=total_invoices,
        total_items_sold=total_items,
        avg_revenue_per_client=round_money(
            safe_average(total_revenue, total_clients), places
        ),
        regular=regular,
        non_regular=non_regular,
        top_clients=rank_clients(per_client.values(), now, top_limit, places),
    )
    logger.debug(
        "clients_segmented",
        total_clients=total_clients,
        total_invoices=total_invoices,
        ranked=len(report.top_clients),
    )
    return report

"""Company-wide sales figures: per-day series, per-product totals and a summary."""

from collections.abc import Iterable

from billing.core.entities.invoice import Invoice, PaymentStatus
from billing.core.entities.report import DailySales, ProductSales, SalesSummary
from billing.core.money import MONEY_PLACES, round_money, safe_average, to_amount


def daily_sales(
    invoices: Iterable[Invoice], places: int = MONEY_PLACES
) -> list[DailySales]:
    """Grand totals and counts grouped by calendar day, oldest first."""
    days: dict = {}
    for invoice in invoices:
        day = invoice.date.date()
        entry = days.get(day)
        if entry is None:
            entry = days[day] = DailySales(date=day)
        entry.total_sales += to_amount(invoice.grand_total)
        entry.invoice_count += 1

    series = [days[day] for day in sorted(days)]
    for entry in series:
        entry.total_sales = round_money(entry.total_sales, places)
    return series


def product_sales(
    invoices: Iterable[Invoice], places: int = MONEY_PLACES
) -> list[ProductSales]:
    """Quantity and gross amount per subcategory, best sellers first."""
    products: dict[int, ProductSales] = {}
    for invoice in invoices:
        for item in invoice.items:
            entry = products.get(item.subcategory_id)
            if entry is None:
                entry = products[item.subcategory_id] = ProductSales(
                    subcategory_id=item.subcategory_id,
                    product_name=item.subcategory_name or item.name,
                    category_name=item.category_name,
                    subcategory_name=item.subcategory_name,
                )
            quantity = item.quantity or 1
            entry.total_quantity += quantity
            entry.total_amount += to_amount(item.unit_price) * quantity

    report = sorted(products.values(), key=lambda p: p.total_amount, reverse=True)
    for entry in report:
        entry.total_amount = round_money(entry.total_amount, places)
    return report


def summary(invoices: Iterable[Invoice], places: int = MONEY_PLACES) -> SalesSummary:
    result = SalesSummary()
    for invoice in invoices:
        result.total_invoices += 1
        result.total_amount += to_amount(invoice.grand_total)
        if invoice.payment_status == PaymentStatus.PAID:
            result.paid_invoices += 1
        elif invoice.payment_status == PaymentStatus.PENDING:
            result.pending_invoices += 1
        elif invoice.payment_status == PaymentStatus.PARTIALLY_PAID:
            result.partially_paid_invoices += 1

    result.avg_invoice_value = round_money(
        safe_average(result.total_amount, result.total_invoices), places
    )
    result.total_amount = round_money(result.total_amount, places)
    return result

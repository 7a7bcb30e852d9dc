"""
Category and subcategory performance.

Folds invoice line items into the live catalog of a branch. Items pointing
at categories or subcategories that are unknown or deleted are skipped, so
historical invoices never break a report after catalog changes.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from billing.core.entities.catalog import Branch
from billing.core.entities.invoice import Invoice, PricedLineItem
from billing.core.entities.report import (
    CategoryPerformance,
    RankedSubcategory,
    SubcategoryRevenue,
    TopSubcategory,
)
from billing.core.money import MONEY_PLACES, round_money, to_amount
from billing.core.services.period_bucketer import (
    THIS_MONTH,
    THIS_WEEK,
    TODAY,
    WindowSpec,
    fixed_windows,
)


@dataclass(frozen=True)
class PerformanceWindows:
    """Windows feeding the daily/weekly/monthly/total counters."""

    daily: WindowSpec
    weekly: WindowSpec
    monthly: WindowSpec
    total: WindowSpec

    @classmethod
    def for_report(cls, now: datetime, report_range: WindowSpec) -> "PerformanceWindows":
        named = {w.name: w for w in fixed_windows(now)}
        return cls(
            daily=named[TODAY],
            weekly=named[THIS_WEEK],
            monthly=named[THIS_MONTH],
            total=report_range,
        )

    def all(self) -> list[WindowSpec]:
        return [self.daily, self.weekly, self.monthly, self.total]


@dataclass
class CategoryPerformanceResult:
    categories: list[CategoryPerformance] = field(default_factory=list)
    top_subcategories: list[RankedSubcategory] = field(default_factory=list)


def line_amount(item: PricedLineItem) -> float:
    """Stored final amount, or price times quantity for records without one."""
    if item.final_amount is not None:
        return to_amount(item.final_amount)
    return to_amount(item.unit_price) * (item.quantity or 1)


def init_performance(branch: Branch) -> dict[int, CategoryPerformance]:
    """Zeroed counters for every live category and live subcategory."""
    performance: dict[int, CategoryPerformance] = {}
    for category in branch.live_categories():
        performance[category.id] = CategoryPerformance(
            id=category.id,
            name=category.name,
            subcategories={
                sub.id: SubcategoryRevenue(name=sub.name)
                for sub in category.live_subcategories()
            },
        )
    return performance


def aggregate(
    branch: Branch,
    invoices: Iterable[Invoice],
    windows: PerformanceWindows,
    top_limit: int = 10,
    places: int = MONEY_PLACES,
) -> CategoryPerformanceResult:
    """
    Accumulate per-category and per-subcategory revenue.

    An invoice counts toward every window containing its date, so today's
    revenue is also part of the weekly and monthly counters. Subcategory
    revenue and the top-subcategory pointer follow the report range.
    """
    performance = init_performance(branch)

    for invoice in invoices:
        in_day = windows.daily.contains(invoice.date)
        in_week = windows.weekly.contains(invoice.date)
        in_month = windows.monthly.contains(invoice.date)
        in_range = windows.total.contains(invoice.date)
        if not (in_day or in_week or in_month or in_range):
            continue

        for item in invoice.items:
            category = performance.get(item.category_id)
            if category is None:
                continue

            amount = line_amount(item)
            if in_day:
                category.daily_revenue += amount
            if in_week:
                category.weekly_revenue += amount
            if in_month:
                category.monthly_revenue += amount
            if not in_range:
                continue
            category.total_revenue += amount

            subcategory = category.subcategories.get(item.subcategory_id)
            if subcategory is None:
                continue
            subcategory.revenue += amount
            if subcategory.revenue > category.top_subcategory.revenue:
                category.top_subcategory = TopSubcategory(
                    name=subcategory.name, revenue=subcategory.revenue
                )

    ranked = rank_subcategories(performance.values(), top_limit)

    for category in performance.values():
        category.daily_revenue = round_money(category.daily_revenue, places)
        category.weekly_revenue = round_money(category.weekly_revenue, places)
        category.monthly_revenue = round_money(category.monthly_revenue, places)
        category.total_revenue = round_money(category.total_revenue, places)
        for subcategory in category.subcategories.values():
            subcategory.revenue = round_money(subcategory.revenue, places)
        category.top_subcategory.revenue = round_money(
            category.top_subcategory.revenue, places
        )
    for entry in ranked:
        entry.revenue = round_money(entry.revenue, places)

    return CategoryPerformanceResult(
        categories=list(performance.values()),
        top_subcategories=ranked,
    )


def rank_subcategories(
    categories: Iterable[CategoryPerformance], limit: int = 10
) -> list[RankedSubcategory]:
    """Top subcategories with revenue across all categories, ties kept in catalog order."""
    earning = [
        (category, sub_id, sub)
        for category in categories
        for sub_id, sub in category.subcategories.items()
        if sub.revenue > 0
    ]
    earning.sort(key=lambda row: row[2].revenue, reverse=True)

    return [
        RankedSubcategory(
            rank=rank,
            subcategory_id=sub_id,
            name=sub.name,
            category=category.name,
            category_id=category.id,
            revenue=sub.revenue,
        )
        for rank, (category, sub_id, sub) in enumerate(earning[:limit], start=1)
    ]


def categories_without_revenue(categories: Iterable[CategoryPerformance]) -> list[str]:
    return [c.name for c in categories if c.total_revenue == 0]

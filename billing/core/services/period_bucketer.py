"""
Period revenue bucketing.

Every reporting window covers whole days: start is normalized to
00:00:00.000 and end to 23:59:59.999 of its day, and an invoice belongs to a
window when start <= invoice.date <= end. Weeks start on Sunday.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from billing.core.entities.invoice import Invoice
from billing.core.entities.report import ReportWindow
from billing.core.exceptions import InvalidDateRangeError
from billing.core.money import MONEY_PLACES, round_money, safe_average, to_amount

TODAY = "Today"
YESTERDAY = "Yesterday"
THIS_WEEK = "This Week"
LAST_WEEK = "Last Week"
THIS_MONTH = "This Month"
LAST_MONTH = "Last Month"
CUSTOM_RANGE = "Custom Range"

# Relative ranges accepted by the reports, in days back from today
RELATIVE_RANGES = {"7d": 7, "30d": 30, "90d": 90}


def start_of_day(value: datetime | date) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time.min)


def end_of_day(value: datetime | date) -> datetime:
    day = value.date() if isinstance(value, datetime) else value
    return datetime.combine(day, time(23, 59, 59, 999000))


@dataclass(frozen=True)
class WindowSpec:
    """A named, inclusive [start, end] range."""

    name: str
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    @property
    def days(self) -> int:
        """Number of calendar days spanned."""
        return (self.end.date() - self.start.date()).days + 1


def window(name: str, start: datetime | date, end: datetime | date) -> WindowSpec:
    """Build a window widened to full days."""
    return WindowSpec(name=name, start=start_of_day(start), end=end_of_day(end))


def week_start(today: date) -> date:
    """Sunday on or before today."""
    return today - timedelta(days=(today.weekday() + 1) % 7)


def month_start(today: date) -> date:
    return today.replace(day=1)


def fixed_windows(now: datetime) -> list[WindowSpec]:
    """Today, Yesterday, This Week, Last Week, This Month, Last Month."""
    today = now.date()
    this_week = week_start(today)
    this_month = month_start(today)
    last_month_end = this_month - timedelta(days=1)

    return [
        window(TODAY, today, today),
        window(YESTERDAY, today - timedelta(days=1), today - timedelta(days=1)),
        window(THIS_WEEK, this_week, today),
        window(LAST_WEEK, this_week - timedelta(days=7), this_week - timedelta(days=1)),
        window(THIS_MONTH, this_month, today),
        window(LAST_MONTH, month_start(last_month_end), last_month_end),
    ]


def custom_window(
    start: datetime | date, end: datetime | date, name: str = CUSTOM_RANGE
) -> WindowSpec:
    """Explicit range; an inverted range is rejected."""
    spec = window(name, start, end)
    if spec.start > spec.end:
        raise InvalidDateRangeError(
            "Start date must not be after end date",
            value=f"{start}..{end}",
        )
    return spec


def relative_window(days: int, now: datetime, name: str | None = None) -> WindowSpec:
    """From midnight `days` days ago through the end of today."""
    today = now.date()
    return window(name or f"Last {days} Days", today - timedelta(days=days), today)


def covering(windows: Iterable[WindowSpec]) -> WindowSpec | None:
    """Smallest window spanning all given windows, for a single snapshot fetch."""
    windows = list(windows)
    if not windows:
        return None
    return WindowSpec(
        name="Snapshot",
        start=min(w.start for w in windows),
        end=max(w.end for w in windows),
    )


def summarize(
    invoices: Iterable[Invoice], spec: WindowSpec, places: int = MONEY_PLACES
) -> ReportWindow:
    """Revenue, count and average of the invoices dated inside one window."""
    revenue = 0.0
    count = 0
    for invoice in invoices:
        if not spec.contains(invoice.date):
            continue
        revenue += to_amount(invoice.grand_total)
        count += 1

    return ReportWindow(
        name=spec.name,
        start=spec.start,
        end=spec.end,
        revenue=round_money(revenue, places),
        count=count,
        average_value=round_money(safe_average(revenue, count), places),
    )


def bucket(
    invoices: Iterable[Invoice],
    windows: Sequence[WindowSpec],
    places: int = MONEY_PLACES,
) -> list[ReportWindow]:
    """Summarize the same invoice snapshot over each window, in order."""
    snapshot = list(invoices)
    return [summarize(snapshot, spec, places) for spec in windows]

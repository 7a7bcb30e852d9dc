"""Row conversion helpers shared by the SQLite stores."""

from datetime import date, datetime

import aiosqlite

from billing.core.entities.invoice import local_naive


def to_db_timestamp(value: datetime | None) -> str | None:
    """ISO timestamp with fixed microsecond precision so text ordering is chronological."""
    return value.isoformat(timespec="microseconds") if value is not None else None


def parse_timestamp(value: str | None) -> datetime | None:
    """Stored timestamp as naive local time, whatever offset it was written with."""
    if not value:
        return None
    try:
        return local_naive(datetime.fromisoformat(value))
    except (ValueError, TypeError):
        return None


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except (ValueError, TypeError):
        return None


def row_float(row: aiosqlite.Row, key: str) -> float:
    value = row[key]
    return float(value) if value is not None else 0.0

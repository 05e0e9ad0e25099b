from __future__ import annotations

import calendar
from datetime import date, datetime, timezone
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date (expected YYYY-MM-DD)")


def parse_month(value: str) -> tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    try:
        d = datetime.strptime((value or "").strip(), "%Y-%m")
    except ValueError:
        raise ValidationError("Invalid month (expected YYYY-MM)")
    return d.year, d.month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def as_date(value: Any) -> Optional[date]:
    """Coerce a backend value (ISO string, date or datetime) into a date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def as_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    # Postgres returns "+00:00" offsets, older drivers a trailing "Z".
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)

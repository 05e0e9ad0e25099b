from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

Row = Dict[str, Any]


class TableClient(Protocol):
    """Generic query client over the academy tables.

    Mirrors the hosted table API: equality/range filters, ordering and a limit
    on reads; writes return the affected rows as the backend sees them.
    Backend failures are raised as DataAccessError.
    """

    def select(
        self,
        table: str,
        *,
        eq: Optional[Mapping[str, Any]] = None,
        gte: Optional[Mapping[str, Any]] = None,
        lte: Optional[Mapping[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        raise NotImplementedError

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        raise NotImplementedError

    def update(self, table: str, values: Mapping[str, Any], *, eq: Mapping[str, Any]) -> List[Row]:
        raise NotImplementedError

    def delete(self, table: str, *, eq: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def upsert(self, table: str, rows: Sequence[Mapping[str, Any]], *, on_conflict: str) -> List[Row]:
        raise NotImplementedError


def to_wire(value: Any) -> Any:
    """Convert a Python value into the JSON-friendly form the table API stores."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def wire_row(row: Mapping[str, Any]) -> Row:
    return {k: to_wire(v) for k, v in row.items()}


def require_filters(eq: Optional[Mapping[str, Any]], op: str) -> Mapping[str, Any]:
    # Unfiltered update/delete would touch the whole table.
    if not eq:
        raise ValueError(f"{op} requires at least one equality filter")
    return eq

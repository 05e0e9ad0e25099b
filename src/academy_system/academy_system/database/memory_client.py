from __future__ import annotations

import copy
import threading
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..common.datetime_utils import utc_now_iso
from ..core.exceptions import DataAccessError
from .client import Row, require_filters, to_wire, wire_row

# Columns the hosted schema declares UNIQUE.
DEFAULT_UNIQUE_COLUMNS = {
    "academy_users": ("code",),
    "academy_settings": ("key",),
}


class InMemoryTableClient:
    """Process-local table store used by the testing configuration.

    Rows are kept in their wire form (ISO strings for dates) so reads look
    the same as the hosted backend's responses.
    """

    def __init__(self, *, unique_columns: Optional[Mapping[str, Sequence[str]]] = None):
        self._tables: Dict[str, List[Row]] = {}
        self._unique = dict(DEFAULT_UNIQUE_COLUMNS if unique_columns is None else unique_columns)
        self._lock = threading.Lock()

    def _rows(self, table: str) -> List[Row]:
        return self._tables.setdefault(table, [])

    @staticmethod
    def _matches(
        row: Row,
        eq: Optional[Mapping[str, Any]],
        gte: Optional[Mapping[str, Any]] = None,
        lte: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        for col, value in (eq or {}).items():
            if row.get(col) != to_wire(value):
                return False
        for col, value in (gte or {}).items():
            v = row.get(col)
            if v is None or v < to_wire(value):
                return False
        for col, value in (lte or {}).items():
            v = row.get(col)
            if v is None or v > to_wire(value):
                return False
        return True

    def _check_unique(self, table: str, candidate: Row, *, ignore_id: Any = None) -> None:
        for col in self._unique.get(table, ()):
            value = candidate.get(col)
            if value is None:
                continue
            for existing in self._rows(table):
                if existing.get("id") != ignore_id and existing.get(col) == value:
                    raise DataAccessError(
                        f'duplicate key value violates unique constraint "{table}_{col}_key"'
                    )

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
        with self._lock:
            out = [copy.deepcopy(r) for r in self._rows(table) if self._matches(r, eq, gte, lte)]
        if order_by:
            # NULLs sort last ascending, first descending (Postgres default).
            out.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by) or ""), reverse=descending)
        if limit is not None:
            out = out[: int(limit)]
        return out

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        created: List[Row] = []
        with self._lock:
            for row in rows:
                new = wire_row(row)
                new.setdefault("id", str(uuid.uuid4()))
                new.setdefault("created_at", utc_now_iso())
                self._check_unique(table, new)
                self._rows(table).append(new)
                created.append(copy.deepcopy(new))
        return created

    def update(self, table: str, values: Mapping[str, Any], *, eq: Mapping[str, Any]) -> List[Row]:
        require_filters(eq, "update")
        changes = wire_row(values)
        updated: List[Row] = []
        with self._lock:
            for row in self._rows(table):
                if self._matches(row, eq):
                    self._check_unique(table, {**row, **changes}, ignore_id=row.get("id"))
                    row.update(changes)
                    updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table: str, *, eq: Mapping[str, Any]) -> int:
        require_filters(eq, "delete")
        with self._lock:
            rows = self._rows(table)
            keep = [r for r in rows if not self._matches(r, eq)]
            removed = len(rows) - len(keep)
            self._tables[table] = keep
        return removed

    def upsert(self, table: str, rows: Sequence[Mapping[str, Any]], *, on_conflict: str) -> List[Row]:
        out: List[Row] = []
        for row in rows:
            key = {on_conflict: row[on_conflict]}
            changed = self.update(table, row, eq=key)
            out.extend(changed if changed else self.insert(table, [row]))
        return out

from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from postgrest.exceptions import APIError
from supabase import Client, create_client

from ..core.exceptions import DataAccessError
from .client import Row, require_filters, to_wire, wire_row

logger = logging.getLogger(__name__)


class SupabaseTableClient:
    """TableClient backed by the hosted Supabase (PostgREST) table API."""

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def connect(cls, url: str, key: str) -> "SupabaseTableClient":
        if not url or not key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be configured")
        return cls(create_client(url, key))

    def _execute(self, query, *, op: str, table: str) -> List[Row]:
        try:
            response = query.execute()
        except APIError as e:
            logger.error("supabase %s on %s failed: %s", op, table, e.message)
            raise DataAccessError(e.message or str(e)) from e
        return list(response.data or [])

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
        query = self._client.table(table).select("*")
        for col, value in (eq or {}).items():
            query = query.eq(col, to_wire(value))
        for col, value in (gte or {}).items():
            query = query.gte(col, to_wire(value))
        for col, value in (lte or {}).items():
            query = query.lte(col, to_wire(value))
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.limit(int(limit))
        return self._execute(query, op="select", table=table)

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        payload = [wire_row(r) for r in rows]
        return self._execute(self._client.table(table).insert(payload), op="insert", table=table)

    def update(self, table: str, values: Mapping[str, Any], *, eq: Mapping[str, Any]) -> List[Row]:
        query = self._client.table(table).update(wire_row(values))
        for col, value in require_filters(eq, "update").items():
            query = query.eq(col, to_wire(value))
        return self._execute(query, op="update", table=table)

    def delete(self, table: str, *, eq: Mapping[str, Any]) -> int:
        query = self._client.table(table).delete()
        for col, value in require_filters(eq, "delete").items():
            query = query.eq(col, to_wire(value))
        return len(self._execute(query, op="delete", table=table))

    def upsert(self, table: str, rows: Sequence[Mapping[str, Any]], *, on_conflict: str) -> List[Row]:
        payload = [wire_row(r) for r in rows]
        query = self._client.table(table).upsert(payload, on_conflict=on_conflict)
        return self._execute(query, op="upsert", table=table)

from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import mysql.connector

from ..core.exceptions import DataAccessError
from .client import Row, require_filters, to_wire, wire_row
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _ident(name: str) -> str:
    # Table/column names are interpolated, values never are.
    if not _IDENTIFIER.match(name or ""):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return f"`{name}`"


def _where(
    eq: Optional[Mapping[str, Any]],
    gte: Optional[Mapping[str, Any]] = None,
    lte: Optional[Mapping[str, Any]] = None,
) -> Tuple[str, List[Any]]:
    clauses: List[str] = []
    params: List[Any] = []
    for op, filters in (("=", eq), (">=", gte), ("<=", lte)):
        for col, value in (filters or {}).items():
            clauses.append(f"{_ident(col)} {op} %s")
            params.append(to_wire(value))
    if not clauses:
        return "", params
    return " WHERE " + " AND ".join(clauses), params


class MySQLTableClient:
    """TableClient over a self-hosted MySQL schema (database/schema.sql)."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _run(self, op: str, table: str, fn):
        try:
            return fn()
        except mysql.connector.Error as e:
            logger.error("mysql %s on %s failed: %s", op, table, e.msg)
            raise DataAccessError(e.msg or str(e)) from e

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
        where, params = _where(eq, gte, lte)
        sql = f"SELECT * FROM {_ident(table)}{where}"
        if order_by:
            sql += f" ORDER BY {_ident(order_by)} {'DESC' if descending else 'ASC'}"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        def go():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                return fetchall(cur)

        return self._run("select", table, go)

    def _select_ids(self, cur, table: str, ids: Sequence[str]) -> List[Row]:
        if not ids:
            return []
        marks = ",".join(["%s"] * len(ids))
        cur.execute(f"SELECT * FROM {_ident(table)} WHERE `id` IN ({marks})", tuple(ids))
        return fetchall(cur)

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        def go():
            ids: List[str] = []
            with db_cursor(self._conn_factory) as (_, cur):
                for row in rows:
                    values: Dict[str, Any] = wire_row(row)
                    values.setdefault("id", str(uuid.uuid4()))
                    cols = ", ".join(_ident(c) for c in values)
                    marks = ", ".join(["%s"] * len(values))
                    cur.execute(
                        f"INSERT INTO {_ident(table)} ({cols}) VALUES ({marks})",
                        tuple(values.values()),
                    )
                    ids.append(values["id"])
                return self._select_ids(cur, table, ids)

        return self._run("insert", table, go)

    def update(self, table: str, values: Mapping[str, Any], *, eq: Mapping[str, Any]) -> List[Row]:
        where, params = _where(require_filters(eq, "update"))
        changes = wire_row(values)
        sets = ", ".join(f"{_ident(c)} = %s" for c in changes)

        def go():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT `id` FROM {_ident(table)}{where}", tuple(params))
                ids = [r["id"] for r in fetchall(cur)]
                if not ids:
                    return []
                cur.execute(
                    f"UPDATE {_ident(table)} SET {sets}{where}",
                    tuple(changes.values()) + tuple(params),
                )
                return self._select_ids(cur, table, ids)

        return self._run("update", table, go)

    def delete(self, table: str, *, eq: Mapping[str, Any]) -> int:
        where, params = _where(require_filters(eq, "delete"))

        def go():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {_ident(table)}{where}", tuple(params))
                return int(cur.rowcount)

        return self._run("delete", table, go)

    def upsert(self, table: str, rows: Sequence[Mapping[str, Any]], *, on_conflict: str) -> List[Row]:
        out: List[Row] = []
        for row in rows:
            key = {on_conflict: row[on_conflict]}
            changed = self.update(table, row, eq=key)
            out.extend(changed if changed else self.insert(table, [row]))
        return out

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.constants import ATTENDANCE_TABLE
from ..core.enums import AttendanceStatus
from ..database.client import TableClient
from .model import AttendanceRecord
from .repository import AttendanceRepository


class TableAttendanceRepository(AttendanceRepository):
    def __init__(self, client: TableClient):
        self._client = client

    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        rows = self._client.select(ATTENDANCE_TABLE, eq={"id": record_id}, limit=1)
        return AttendanceRecord.from_row(rows[0]) if rows else None

    def get_for_player_and_date(self, player_id: str, on: date) -> Optional[AttendanceRecord]:
        rows = self._client.select(ATTENDANCE_TABLE, eq={"player_id": player_id, "date": on}, limit=1)
        return AttendanceRecord.from_row(rows[0]) if rows else None

    def list_for_date(self, on: date) -> Sequence[AttendanceRecord]:
        rows = self._client.select(ATTENDANCE_TABLE, eq={"date": on})
        return [AttendanceRecord.from_row(r) for r in rows]

    def list_between(self, *, start: date, end: date, player_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        eq = {"player_id": player_id} if player_id else None
        rows = self._client.select(
            ATTENDANCE_TABLE,
            eq=eq,
            gte={"date": start},
            lte={"date": end},
            order_by="date",
        )
        return [AttendanceRecord.from_row(r) for r in rows]

    def list_for_player(
        self,
        player_id: str,
        *,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        eq: Dict[str, Any] = {"player_id": player_id}
        if status is not None:
            eq["status"] = status
        rows = self._client.select(ATTENDANCE_TABLE, eq=eq, order_by="date", descending=True, limit=limit)
        return [AttendanceRecord.from_row(r) for r in rows]

    def create(
        self,
        *,
        player_id: str,
        trainer_id: Optional[str],
        on: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        rows = self._client.insert(
            ATTENDANCE_TABLE,
            [{"player_id": player_id, "trainer_id": trainer_id, "date": on, "status": status, "notes": notes}],
        )
        return AttendanceRecord.from_row(rows[0])

    def update(self, record_id: str, values: Mapping[str, Any]) -> Optional[AttendanceRecord]:
        rows = self._client.update(ATTENDANCE_TABLE, values, eq={"id": record_id})
        return AttendanceRecord.from_row(rows[0]) if rows else None

    def set_status_for_player_and_date(self, player_id: str, on: date, status: AttendanceStatus) -> int:
        rows = self._client.update(ATTENDANCE_TABLE, {"status": status}, eq={"player_id": player_id, "date": on})
        return len(rows)

    def delete(self, record_id: str) -> bool:
        return self._client.delete(ATTENDANCE_TABLE, eq={"id": record_id}) > 0

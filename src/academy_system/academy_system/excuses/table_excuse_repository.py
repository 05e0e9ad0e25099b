from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import utc_now_iso
from ..core.constants import EXCUSES_TABLE
from ..core.enums import ExcuseStatus
from ..database.client import TableClient
from .model import ExcuseSubmission
from .repository import ExcuseRepository


class TableExcuseRepository(ExcuseRepository):
    def __init__(self, client: TableClient):
        self._client = client

    def get(self, excuse_id: str) -> Optional[ExcuseSubmission]:
        rows = self._client.select(EXCUSES_TABLE, eq={"id": excuse_id}, limit=1)
        return ExcuseSubmission.from_row(rows[0]) if rows else None

    def find_for_player_and_date(self, player_id: str, absence_date: date) -> Optional[ExcuseSubmission]:
        rows = self._client.select(
            EXCUSES_TABLE, eq={"player_id": player_id, "absence_date": absence_date}, limit=1
        )
        return ExcuseSubmission.from_row(rows[0]) if rows else None

    def list_all(
        self,
        *,
        status: Optional[ExcuseStatus] = None,
        player_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[ExcuseSubmission]:
        eq: Dict[str, Any] = {}
        if status is not None:
            eq["status"] = status
        if player_id:
            eq["player_id"] = player_id
        rows = self._client.select(
            EXCUSES_TABLE, eq=eq or None, order_by="submitted_at", descending=True, limit=limit
        )
        return [ExcuseSubmission.from_row(r) for r in rows]

    def create(
        self,
        *,
        player_id: str,
        absence_date: date,
        reason: str,
        file_url: Optional[str] = None,
    ) -> ExcuseSubmission:
        rows = self._client.insert(
            EXCUSES_TABLE,
            [
                {
                    "player_id": player_id,
                    "absence_date": absence_date,
                    "reason": reason,
                    "file_url": file_url,
                    "status": ExcuseStatus.PENDING,
                    "submitted_at": utc_now_iso(),
                }
            ],
        )
        return ExcuseSubmission.from_row(rows[0])

    def decide(
        self,
        excuse_id: str,
        *,
        status: ExcuseStatus,
        trainer_response: Optional[str],
        reviewed_at: datetime,
    ) -> Optional[ExcuseSubmission]:
        rows = self._client.update(
            EXCUSES_TABLE,
            {"status": status, "trainer_response": trainer_response, "reviewed_at": reviewed_at},
            eq={"id": excuse_id},
        )
        return ExcuseSubmission.from_row(rows[0]) if rows else None

    def delete(self, excuse_id: str) -> bool:
        return self._client.delete(EXCUSES_TABLE, eq={"id": excuse_id}) > 0

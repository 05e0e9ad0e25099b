from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_player_and_date(self, player_id: str, on: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_date(self, on: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_between(self, *, start: date, end: date, player_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_player(
        self,
        player_id: str,
        *,
        status: Optional[AttendanceStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        player_id: str,
        trainer_id: Optional[str],
        on: date,
        status: AttendanceStatus,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def update(self, record_id: str, values: Mapping[str, Any]) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def set_status_for_player_and_date(self, player_id: str, on: date, status: AttendanceStatus) -> int:
        """Set the status of every row matching (player, date); returns the number of rows changed."""

        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

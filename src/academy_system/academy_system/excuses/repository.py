from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ExcuseStatus
from .model import ExcuseSubmission


class ExcuseRepository(Protocol):
    def get(self, excuse_id: str) -> Optional[ExcuseSubmission]:
        raise NotImplementedError

    def find_for_player_and_date(self, player_id: str, absence_date: date) -> Optional[ExcuseSubmission]:
        raise NotImplementedError

    def list_all(
        self,
        *,
        status: Optional[ExcuseStatus] = None,
        player_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Sequence[ExcuseSubmission]:
        raise NotImplementedError

    def create(
        self,
        *,
        player_id: str,
        absence_date: date,
        reason: str,
        file_url: Optional[str] = None,
    ) -> ExcuseSubmission:
        raise NotImplementedError

    def decide(
        self,
        excuse_id: str,
        *,
        status: ExcuseStatus,
        trainer_response: Optional[str],
        reviewed_at: datetime,
    ) -> Optional[ExcuseSubmission]:
        raise NotImplementedError

    def delete(self, excuse_id: str) -> bool:
        raise NotImplementedError

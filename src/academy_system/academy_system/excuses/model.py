from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import as_date, as_datetime
from ..core.enums import ExcuseStatus


@dataclass(frozen=True)
class ExcuseSubmission:
    """A player's justification for one absent day, reviewed by a trainer."""

    id: str
    player_id: str
    absence_date: Optional[date]
    reason: str
    status: ExcuseStatus
    trainer_response: Optional[str] = None
    file_url: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ExcuseSubmission":
        return cls(
            id=str(row["id"]),
            player_id=str(row["player_id"]),
            absence_date=as_date(row.get("absence_date")),
            reason=row.get("reason") or "",
            status=ExcuseStatus(row.get("status") or ExcuseStatus.PENDING.value),
            trainer_response=row.get("trainer_response"),
            file_url=row.get("file_url"),
            submitted_at=as_datetime(row.get("submitted_at")),
            reviewed_at=as_datetime(row.get("reviewed_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_id": self.player_id,
            "absence_date": self.absence_date.isoformat() if self.absence_date else None,
            "reason": self.reason,
            "status": self.status.value,
            "trainer_response": self.trainer_response,
            "file_url": self.file_url,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "reviewed_at": self.reviewed_at.isoformat() if self.reviewed_at else None,
        }


@dataclass(frozen=True)
class ExcuseDecision:
    """Outcome of approving/rejecting an excuse.

    The excuse row is always updated; the attendance flip and the notices are
    best-effort and reported here instead of raised.
    """

    excuse: ExcuseSubmission
    attendance_updated: bool
    notifications_sent: int

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional

from ..common.datetime_utils import as_date, as_datetime
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One attendance row per (player, date)."""

    id: str
    player_id: str
    trainer_id: Optional[str]
    date: date
    status: AttendanceStatus
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "AttendanceRecord":
        return cls(
            id=str(row["id"]),
            player_id=str(row["player_id"]),
            trainer_id=row.get("trainer_id"),
            date=as_date(row["date"]),
            status=AttendanceStatus(row["status"]),
            notes=row.get("notes"),
            created_at=as_datetime(row.get("created_at")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_id": self.player_id,
            "trainer_id": self.trainer_id,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


def round_half_up(value: float) -> int:
    # Python's round() is banker's rounding; rates round .5 up.
    return int(math.floor(value + 0.5))


def attendance_rate(present: int, absent: int, excused: int) -> int:
    """Percentage of present days over all recorded days, 0 when nothing is recorded."""
    total = present + absent + excused
    if total == 0:
        return 0
    return round_half_up(present / total * 100)


@dataclass(frozen=True)
class AttendanceCounts:
    present: int = 0
    absent: int = 0
    excused: int = 0

    @classmethod
    def from_statuses(cls, statuses: Iterable[AttendanceStatus]) -> "AttendanceCounts":
        present = absent = excused = 0
        for s in statuses:
            if s == AttendanceStatus.PRESENT:
                present += 1
            elif s == AttendanceStatus.ABSENT:
                absent += 1
            elif s == AttendanceStatus.EXCUSED:
                excused += 1
        return cls(present=present, absent=absent, excused=excused)

    @property
    def total(self) -> int:
        return self.present + self.absent + self.excused

    @property
    def rate(self) -> int:
        return attendance_rate(self.present, self.absent, self.excused)

    def to_dict(self) -> Dict[str, int]:
        return {
            "present": self.present,
            "absent": self.absent,
            "excused": self.excused,
            "total": self.total,
            "rate": self.rate,
        }

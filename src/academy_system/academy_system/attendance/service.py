from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from ..core.constants import ACADEMY_NAME_KEY, DEFAULT_ACADEMY_NAME, DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus, NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..notifications.service import NotificationService
from ..settings.service import SettingsService
from ..users.model import AcademyUser
from ..users.repository import UserRepository
from .model import AttendanceCounts, AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkResult:
    record: AttendanceRecord
    created: bool
    alert_sent: bool = False


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        notifications: NotificationService,
        settings: SettingsService,
    ):
        self._attendance = attendance
        self._users = users
        self._notifications = notifications
        self._settings = settings

    def _get_learner(self, player_id: str) -> AcademyUser:
        player = self._users.get_by_id(player_id)
        if not player:
            raise NotFoundError("Player not found")
        if not player.is_learner:
            raise ValidationError("Attendance is only recorded for players and students")
        return player

    def mark(
        self,
        *,
        player_id: str,
        status: AttendanceStatus,
        on: date,
        trainer_id: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> MarkResult:
        """Record a player's status for a day, replacing any status already recorded."""
        player = self._get_learner(player_id)
        notes = (notes or "").strip() or None

        existing = self._attendance.get_for_player_and_date(player_id, on)
        if existing:
            values: Dict[str, Any] = {"status": status}
            if notes is not None:
                values["notes"] = notes
            record = self._attendance.update(existing.id, values)
            if not record:
                raise NotFoundError("Attendance record not found")
            created = False
        else:
            record = self._attendance.create(
                player_id=player_id, trainer_id=trainer_id, on=on, status=status, notes=notes
            )
            created = True

        alert_sent = False
        if status == AttendanceStatus.ABSENT:
            alert_sent = self._send_absence_alert(player, on)
        return MarkResult(record=record, created=created, alert_sent=alert_sent)

    def _send_absence_alert(self, player: AcademyUser, on: date) -> bool:
        if not player.guardian_phone:
            return False
        academy = self._settings.get(ACADEMY_NAME_KEY, DEFAULT_ACADEMY_NAME)
        message = (
            f"Notice from {academy}: {player.full_name} was absent on {on.isoformat()}. "
            "Please contact us if you have any questions."
        )
        return self._notifications.send_sms(
            phone=player.guardian_phone,
            title="Absence alert",
            message=message,
            type=NotificationType.ABSENCE_ALERT,
            user_id=player.id,
        )

    def mark_all_present(self, *, player_ids: Sequence[str], on: date, trainer_id: Optional[str] = None) -> int:
        count = 0
        for player_id in player_ids:
            self.mark(player_id=player_id, status=AttendanceStatus.PRESENT, on=on, trainer_id=trainer_id)
            count += 1
        return count

    def list_for_date(self, on: date) -> List[AttendanceRecord]:
        return list(self._attendance.list_for_date(on))

    def update_record(
        self,
        record_id: str,
        *,
        status: Optional[AttendanceStatus] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        values: Dict[str, Any] = {}
        if status is not None:
            values["status"] = status
        if notes is not None:
            values["notes"] = notes.strip() or None
        if not values:
            raise ValidationError("Nothing to update")

        record = self._attendance.update(record_id, values)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def delete_record(self, record_id: str) -> None:
        if not self._attendance.delete(record_id):
            raise NotFoundError("Attendance record not found")

    def history(self, player_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> List[AttendanceRecord]:
        return list(self._attendance.list_for_player(player_id, limit=limit))

    def absences(self, player_id: str) -> List[AttendanceRecord]:
        """Absent days a player can still submit an excuse for."""
        return list(self._attendance.list_for_player(player_id, status=AttendanceStatus.ABSENT))

    def player_statistics(self, player_id: str) -> AttendanceCounts:
        records = self._attendance.list_for_player(player_id)
        return AttendanceCounts.from_statuses(r.status for r in records)

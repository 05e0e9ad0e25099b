from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus, ExcuseStatus, NotificationType, UserStatus, UserType
from ..core.exceptions import AuthorizationError, DataAccessError, NotFoundError, ValidationError
from ..notifications.model import NewNotification
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import ExcuseDecision, ExcuseSubmission
from .repository import ExcuseRepository

logger = logging.getLogger(__name__)


class ExcuseService:
    """Use case: players justify absences, trainers approve or reject them."""

    def __init__(
        self,
        excuses: ExcuseRepository,
        attendance: AttendanceRepository,
        users: UserRepository,
        notifications: NotificationService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._excuses = excuses
        self._attendance = attendance
        self._users = users
        self._notifications = notifications
        self._clock = clock

    def submit(
        self,
        *,
        player_id: str,
        absence_date: date,
        reason: str,
        file_url: Optional[str] = None,
    ) -> ExcuseSubmission:
        player = self._users.get_by_id(player_id)
        if not player:
            raise NotFoundError("Player not found")
        if not player.is_learner:
            raise AuthorizationError("Only players and students can submit excuses")

        reason = require_non_empty(reason, "Reason")

        record = self._attendance.get_for_player_and_date(player_id, absence_date)
        if not record or record.status != AttendanceStatus.ABSENT:
            raise ValidationError("No recorded absence on this date")

        if self._excuses.find_for_player_and_date(player_id, absence_date):
            raise ValidationError("An excuse for this date has already been submitted")

        excuse = self._excuses.create(
            player_id=player_id,
            absence_date=absence_date,
            reason=reason,
            file_url=(file_url or "").strip() or None,
        )

        trainers = self._users.list_by_type(UserType.TRAINER, status=UserStatus.ACTIVE)
        self._notifications.notify_many(
            [
                NewNotification(
                    type=NotificationType.EXCUSE_REQUEST,
                    title=f"New excuse request from {player.full_name}",
                    message=f"Code: {player.code}\nAbsence date: {absence_date.isoformat()}\nReason: {reason}",
                    user_id=t.id,
                )
                for t in trainers
            ]
        )
        return excuse

    def list_excuses(self, *, status: Optional[ExcuseStatus] = None, player_id: Optional[str] = None) -> List[Dict[str, Any]]:
        excuses = self._excuses.list_all(status=status, player_id=player_id)
        people = {u.id: u for u in self._users.list_all()}
        out: List[Dict[str, Any]] = []
        for e in excuses:
            row = e.to_dict()
            player = people.get(e.player_id)
            row["player_name"] = player.full_name if player else None
            row["player_code"] = player.code if player else None
            out.append(row)
        return out

    def approve(self, excuse_id: str, *, trainer_response: str = "") -> ExcuseDecision:
        return self.decide(excuse_id, decision=ExcuseStatus.APPROVED, trainer_response=trainer_response)

    def reject(self, excuse_id: str, *, trainer_response: str = "") -> ExcuseDecision:
        return self.decide(excuse_id, decision=ExcuseStatus.REJECTED, trainer_response=trainer_response)

    def decide(self, excuse_id: str, *, decision: ExcuseStatus, trainer_response: str = "") -> ExcuseDecision:
        """Mark the excuse, then (on approval) flip the linked attendance row to excused.

        Writes after the excuse update are not rolled back: their failures are
        logged and reflected in the returned decision.
        """
        if decision not in (ExcuseStatus.APPROVED, ExcuseStatus.REJECTED):
            raise ValidationError("Decision must be approved or rejected")

        excuse = self._excuses.get(excuse_id)
        if not excuse:
            raise NotFoundError("Excuse not found")
        if excuse.status != ExcuseStatus.PENDING:
            raise ValidationError("This excuse has already been reviewed")

        response = (trainer_response or "").strip() or None
        updated = self._excuses.decide(
            excuse_id, status=decision, trainer_response=response, reviewed_at=self._clock()
        )
        if not updated:
            raise NotFoundError("Excuse not found")

        attendance_updated = False
        if decision == ExcuseStatus.APPROVED:
            attendance_updated = self._mark_attendance_excused(updated)

        sent = self._notify_decision(updated, response)
        logger.info(
            "excuse %s %s (attendance_updated=%s, notifications=%d)",
            excuse_id, decision.value, attendance_updated, sent,
        )
        return ExcuseDecision(excuse=updated, attendance_updated=attendance_updated, notifications_sent=sent)

    def _mark_attendance_excused(self, excuse: ExcuseSubmission) -> bool:
        if excuse.absence_date is None:
            logger.warning("excuse %s has no absence date; attendance left unchanged", excuse.id)
            return False
        try:
            changed = self._attendance.set_status_for_player_and_date(
                excuse.player_id, excuse.absence_date, AttendanceStatus.EXCUSED
            )
        except DataAccessError as e:
            logger.error("excuse %s approved but attendance update failed: %s", excuse.id, e)
            return False
        if not changed:
            logger.warning(
                "excuse %s approved but no attendance row for %s on %s",
                excuse.id, excuse.player_id, excuse.absence_date,
            )
        return changed > 0

    def _notify_decision(self, excuse: ExcuseSubmission, response: Optional[str]) -> int:
        approved = excuse.status == ExcuseStatus.APPROVED
        when = excuse.absence_date.isoformat() if excuse.absence_date else "-"
        verb = "approved" if approved else "rejected"
        ntype = NotificationType.EXCUSE_APPROVED if approved else NotificationType.EXCUSE_REJECTED
        title = f"Excuse {verb}"
        message = f"Your excuse for {when} was {verb}. Trainer response: {response or '-'}"

        sent = int(self._notifications.notify(type=ntype, title=title, message=message, user_id=excuse.player_id))
        if not approved:
            return sent

        try:
            player = self._users.get_by_id(excuse.player_id)
        except DataAccessError as e:
            logger.error("could not load player %s for excuse notice: %s", excuse.player_id, e)
            return sent
        phone = player.contact_phone() if player else None
        if phone:
            sent += int(
                self._notifications.send_sms(
                    phone=phone, title=title, message=message, type=ntype, user_id=excuse.player_id
                )
            )
        return sent

    def delete(self, excuse_id: str) -> None:
        if not self._excuses.delete(excuse_id):
            raise NotFoundError("Excuse not found")

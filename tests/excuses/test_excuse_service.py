from __future__ import annotations

from datetime import date, datetime

import pytest

from src.academy_system.academy_system.core.enums import AttendanceStatus, ExcuseStatus, NotificationType, UserType
from src.academy_system.academy_system.core.exceptions import (
    AuthorizationError,
    DataAccessError,
    NotFoundError,
    ValidationError,
)
from src.academy_system.academy_system.excuses.service import ExcuseService

ABSENT_DAY = date(2026, 3, 2)


class FailingAttendance:
    """Delegates reads to the real repository; the excused flip always fails."""

    def __init__(self, inner):
        self._inner = inner

    def get_for_player_and_date(self, player_id, on):
        return self._inner.get_for_player_and_date(player_id, on)

    def set_status_for_player_and_date(self, player_id, on, status):
        raise DataAccessError("connection reset")


def _absent_with_excuse(container, player):
    container.attendance_service.mark(player_id=player.id, status=AttendanceStatus.ABSENT, on=ABSENT_DAY)
    return container.excuse_service.submit(player_id=player.id, absence_date=ABSENT_DAY, reason="Fever")


def _notice_types(container, user_id):
    return [n.type for n in container.notification_service.list_for_user(user_id)]


def test_submit_creates_pending_excuse_and_notifies_trainers(container, player, trainer):
    excuse = _absent_with_excuse(container, player)

    assert excuse.status == ExcuseStatus.PENDING
    assert excuse.absence_date == ABSENT_DAY
    assert _notice_types(container, trainer.id) == [NotificationType.EXCUSE_REQUEST]


def test_submit_requires_recorded_absence(container, player):
    container.attendance_service.mark(player_id=player.id, status=AttendanceStatus.PRESENT, on=ABSENT_DAY)
    with pytest.raises(ValidationError):
        container.excuse_service.submit(player_id=player.id, absence_date=ABSENT_DAY, reason="Fever")


def test_submit_rejects_duplicate_for_same_day(container, player):
    _absent_with_excuse(container, player)
    with pytest.raises(ValidationError, match="already"):
        container.excuse_service.submit(player_id=player.id, absence_date=ABSENT_DAY, reason="Again")


def test_submit_requires_reason(container, player):
    container.attendance_service.mark(player_id=player.id, status=AttendanceStatus.ABSENT, on=ABSENT_DAY)
    with pytest.raises(ValidationError):
        container.excuse_service.submit(player_id=player.id, absence_date=ABSENT_DAY, reason="  ")


def test_only_learners_submit(container, trainer):
    with pytest.raises(AuthorizationError):
        container.excuse_service.submit(player_id=trainer.id, absence_date=ABSENT_DAY, reason="Busy")


def test_approve_marks_attendance_excused_and_notifies_twice(container, player):
    excuse = _absent_with_excuse(container, player)

    result = container.excuse_service.approve(excuse.id, trainer_response="Get well")

    assert result.excuse.status == ExcuseStatus.APPROVED
    assert result.excuse.trainer_response == "Get well"
    assert result.excuse.reviewed_at is not None
    assert result.attendance_updated is True
    assert result.notifications_sent == 2
    record = container.attendance_repo.get_for_player_and_date(player.id, ABSENT_DAY)
    assert record.status == AttendanceStatus.EXCUSED


def test_reject_leaves_attendance_absent(container, player):
    excuse = _absent_with_excuse(container, player)

    result = container.excuse_service.reject(excuse.id, trainer_response="No proof")

    assert result.excuse.status == ExcuseStatus.REJECTED
    assert result.attendance_updated is False
    assert result.notifications_sent == 1
    record = container.attendance_repo.get_for_player_and_date(player.id, ABSENT_DAY)
    assert record.status == AttendanceStatus.ABSENT
    assert NotificationType.EXCUSE_REJECTED in _notice_types(container, player.id)


def test_excuse_can_only_be_reviewed_once(container, player):
    excuse = _absent_with_excuse(container, player)
    container.excuse_service.approve(excuse.id)

    with pytest.raises(ValidationError, match="already been reviewed"):
        container.excuse_service.reject(excuse.id)


def test_unknown_excuse(container):
    with pytest.raises(NotFoundError):
        container.excuse_service.approve("missing")


def test_attendance_failure_does_not_undo_approval(container, player):
    excuse = _absent_with_excuse(container, player)
    svc = ExcuseService(
        container.excuses_repo,
        FailingAttendance(container.attendance_repo),
        container.users_repo,
        container.notification_service,
        clock=lambda: datetime(2026, 3, 3, 18, 0),
    )

    result = svc.approve(excuse.id)

    assert result.attendance_updated is False
    assert container.excuses_repo.get(excuse.id).status == ExcuseStatus.APPROVED
    record = container.attendance_repo.get_for_player_and_date(player.id, ABSENT_DAY)
    assert record.status == AttendanceStatus.ABSENT


def test_list_excuses_adds_player_details(container, player):
    _absent_with_excuse(container, player)

    rows = container.excuse_service.list_excuses(status=ExcuseStatus.PENDING)

    assert len(rows) == 1
    assert rows[0]["player_name"] == "Omar Khaled"
    assert rows[0]["player_code"] == player.code


def test_students_can_submit_too(container):
    student = container.user_service.add_user(user_type=UserType.STUDENT, full_name="Lina", phone="0509")
    container.attendance_service.mark(player_id=student.id, status=AttendanceStatus.ABSENT, on=ABSENT_DAY)

    excuse = container.excuse_service.submit(player_id=student.id, absence_date=ABSENT_DAY, reason="Exam")
    assert excuse.player_id == student.id


def test_approval_without_attendance_row_changes_nothing(container, player):
    excuse = _absent_with_excuse(container, player)
    row = container.attendance_repo.get_for_player_and_date(player.id, ABSENT_DAY)
    container.attendance_service.delete_record(row.id)

    result = container.excuse_service.approve(excuse.id)

    assert result.excuse.status == ExcuseStatus.APPROVED
    assert result.attendance_updated is False
    assert container.attendance_repo.get_for_player_and_date(player.id, ABSENT_DAY) is None

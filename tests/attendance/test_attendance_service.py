from datetime import date

import pytest

from src.academy_system.academy_system.attendance.model import attendance_rate, round_half_up
from src.academy_system.academy_system.core.enums import AttendanceStatus, NotificationType
from src.academy_system.academy_system.core.exceptions import NotFoundError, ValidationError

DAY = date(2026, 3, 2)


def test_mark_creates_then_updates_same_day(container, player, trainer):
    first = container.attendance_service.mark(
        player_id=player.id, status=AttendanceStatus.PRESENT, on=DAY, trainer_id=trainer.id
    )
    second = container.attendance_service.mark(player_id=player.id, status=AttendanceStatus.ABSENT, on=DAY)

    assert first.created is True
    assert second.created is False
    assert second.record.id == first.record.id
    assert [r.status for r in container.attendance_service.list_for_date(DAY)] == [AttendanceStatus.ABSENT]


def test_absence_sends_alert_to_guardian(container, player):
    result = container.attendance_service.mark(player_id=player.id, status=AttendanceStatus.ABSENT, on=DAY)

    assert result.alert_sent is True
    notices = container.notification_service.list_for_user(player.id)
    assert [n.type for n in notices] == [NotificationType.ABSENCE_ALERT]
    assert notices[0].phone_number == "0500000003"


def test_attendance_only_for_learners(container, trainer):
    with pytest.raises(ValidationError):
        container.attendance_service.mark(player_id=trainer.id, status=AttendanceStatus.PRESENT, on=DAY)


def test_mark_all_present(container, player):
    other = container.user_service.add_user(user_type=player.user_type, full_name="Yousef", phone="0508")

    count = container.attendance_service.mark_all_present(player_ids=[player.id, other.id], on=DAY)

    assert count == 2
    statuses = {r.player_id: r.status for r in container.attendance_service.list_for_date(DAY)}
    assert statuses == {player.id: AttendanceStatus.PRESENT, other.id: AttendanceStatus.PRESENT}


def test_player_statistics_and_absences(container, player):
    svc = container.attendance_service
    svc.mark(player_id=player.id, status=AttendanceStatus.PRESENT, on=date(2026, 3, 1))
    svc.mark(player_id=player.id, status=AttendanceStatus.PRESENT, on=date(2026, 3, 2))
    svc.mark(player_id=player.id, status=AttendanceStatus.ABSENT, on=date(2026, 3, 3))

    stats = svc.player_statistics(player.id)
    assert (stats.present, stats.absent, stats.excused, stats.total) == (2, 1, 0, 3)
    assert stats.rate == 67
    assert [r.date for r in svc.absences(player.id)] == [date(2026, 3, 3)]
    assert [r.date for r in svc.history(player.id)][0] == date(2026, 3, 3)


def test_update_and_delete_record(container, player):
    rec = container.attendance_service.mark(player_id=player.id, status=AttendanceStatus.PRESENT, on=DAY).record

    updated = container.attendance_service.update_record(rec.id, notes="late arrival")
    assert updated.notes == "late arrival"

    container.attendance_service.delete_record(rec.id)
    with pytest.raises(NotFoundError):
        container.attendance_service.delete_record(rec.id)


def test_rate_rounds_half_up():
    assert round_half_up(12.5) == 13
    assert attendance_rate(1, 7, 0) == 13
    assert attendance_rate(0, 0, 0) == 0
    assert attendance_rate(1, 1, 1) == 33

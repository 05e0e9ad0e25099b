from __future__ import annotations

from datetime import date, datetime

import pytest

from src.academy_system.academy_system.core.enums import AttendanceStatus, UserType
from src.academy_system.academy_system.core.exceptions import DataAccessError, ValidationError
from src.academy_system.academy_system.reports.service import ReportService


class BrokenAttendance:
    def list_for_date(self, on):
        raise DataAccessError("timeout")


class BrokenExcuses:
    def list_all(self, *, status=None, player_id=None, limit=None):
        raise DataAccessError("timeout")


def _mark(container, player, day: int, status: AttendanceStatus) -> None:
    container.attendance_service.mark(player_id=player.id, status=status, on=date(2026, 3, day))


def test_monthly_report_counts_and_rates(container, player):
    other = container.user_service.add_user(user_type=UserType.PLAYER, full_name="Adam", phone="0511")
    _mark(container, player, 2, AttendanceStatus.PRESENT)
    _mark(container, player, 3, AttendanceStatus.PRESENT)
    _mark(container, player, 4, AttendanceStatus.ABSENT)
    _mark(container, other, 2, AttendanceStatus.EXCUSED)
    # outside the month
    container.attendance_service.mark(player_id=player.id, status=AttendanceStatus.PRESENT, on=date(2026, 4, 1))

    report = container.report_service.monthly_report("2026-03")

    rows = {r.player_id: r for r in report.rows}
    assert (rows[player.id].present, rows[player.id].absent, rows[player.id].rate) == (2, 1, 67)
    assert (rows[other.id].excused, rows[other.id].rate) == (1, 0)
    assert report.rows[0].player_id == player.id
    assert report.summary["total_players"] == 2
    assert report.summary["average_attendance"] == 34


def test_monthly_report_skips_inactive_players(container, player):
    gone = container.user_service.add_user(user_type=UserType.PLAYER, full_name="Gone", phone="0512")
    container.user_service.update_user(gone.id, {"status": "inactive"})

    report = container.report_service.monthly_report("2026-03")

    assert [r.player_id for r in report.rows] == [player.id]


def test_monthly_report_rejects_bad_month(container):
    with pytest.raises(ValidationError):
        container.report_service.monthly_report("2026-13")


def test_saved_monthly_report_round_trip(container, player):
    _mark(container, player, 2, AttendanceStatus.PRESENT)
    container.report_service.save_monthly_report("2026-03")

    saved = container.report_service.saved_monthly_report("2026-03")
    assert saved["month"] == "2026-03"
    assert saved["overall_stats"]["total_present"] == 1
    assert container.report_service.saved_monthly_report("2026-02") is None


def test_daily_snapshot_saved_once(container, player):
    _mark(container, player, 2, AttendanceStatus.PRESENT)

    snap = container.report_service.save_daily_snapshot(date(2026, 3, 2))
    assert (snap.total_players, snap.present_count, snap.attendance_rate) == (1, 1, 100)

    with pytest.raises(ValidationError):
        container.report_service.save_daily_snapshot(date(2026, 3, 2))
    assert [s.date for s in container.report_service.saved_daily_snapshots()] == ["2026-03-02"]


def test_dashboard_falls_back_to_zero_on_backend_errors(container, player):
    svc = ReportService(
        BrokenAttendance(),
        BrokenExcuses(),
        container.settings_repo,
        container.user_directory,
        clock=lambda: datetime(2026, 3, 10, 9, 0),
    )

    stats = svc.dashboard()

    assert stats.total_players == 1
    assert stats.active_players == 1
    assert stats.present_today == 0
    assert stats.attendance_rate == 0
    assert stats.pending_excuses == 0


def test_dashboard_counts_expired_subscriptions(container, player):
    svc = ReportService(
        container.attendance_repo,
        container.excuses_repo,
        container.settings_repo,
        container.user_directory,
        clock=lambda: datetime(2026, 5, 1, 9, 0),
    )
    assert svc.dashboard().expired_subscriptions == 1

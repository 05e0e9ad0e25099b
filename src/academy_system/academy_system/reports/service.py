from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from ..attendance.model import AttendanceCounts, round_half_up
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local, parse_month, utc_now_iso
from ..core.constants import MONTHLY_REPORT_KEY_PREFIX, SAVED_ATTENDANCE_KEY_PREFIX
from ..core.enums import AttendanceStatus, ExcuseStatus, UserStatus, UserType
from ..core.exceptions import DataAccessError, ValidationError
from ..excuses.repository import ExcuseRepository
from ..settings.repository import SettingsRepository
from ..users.directory import UserDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerMonthRow:
    player_id: str
    full_name: str
    code: str
    sport_type: Optional[str]
    present: int
    absent: int
    excused: int
    total: int
    rate: int


@dataclass(frozen=True)
class MonthlyReport:
    month: str
    rows: List[PlayerMonthRow]
    summary: Dict[str, int]
    generated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "overall_stats": dict(self.summary),
            "player_details": [asdict(r) for r in self.rows],
            "created_at": self.generated_at,
        }


@dataclass(frozen=True)
class DailySnapshot:
    date: str
    total_players: int
    present_count: int
    absent_count: int
    excused_count: int
    attendance_rate: int
    saved_at: str


@dataclass(frozen=True)
class DashboardStats:
    total_players: int
    active_players: int
    total_trainers: int
    expired_subscriptions: int
    present_today: int
    attendance_rate: int
    pending_excuses: int


class ReportService:
    """Attendance aggregation. All figures are computed in memory over fetched rows."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        excuses: ExcuseRepository,
        settings: SettingsRepository,
        directory: UserDirectory,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._excuses = excuses
        self._settings = settings
        self._directory = directory
        self._clock = clock

    def _active_players(self):
        return self._directory.by_type(UserType.PLAYER, status=UserStatus.ACTIVE)

    def monthly_report(self, month: str) -> MonthlyReport:
        year, mon = parse_month(month)
        start, end = month_bounds(year, mon)
        records = self._attendance.list_between(start=start, end=end)

        by_player: Dict[str, List[AttendanceStatus]] = {}
        for r in records:
            by_player.setdefault(r.player_id, []).append(r.status)

        rows: List[PlayerMonthRow] = []
        for p in self._active_players():
            counts = AttendanceCounts.from_statuses(by_player.get(p.id, []))
            rows.append(
                PlayerMonthRow(
                    player_id=p.id,
                    full_name=p.full_name,
                    code=p.code,
                    sport_type=p.sport_type,
                    present=counts.present,
                    absent=counts.absent,
                    excused=counts.excused,
                    total=counts.total,
                    rate=counts.rate,
                )
            )
        rows.sort(key=lambda r: (-r.rate, r.full_name))

        summary = {
            "total_players": len(rows),
            "total_present": sum(r.present for r in rows),
            "total_absent": sum(r.absent for r in rows),
            "total_excused": sum(r.excused for r in rows),
            "average_attendance": round_half_up(sum(r.rate for r in rows) / len(rows)) if rows else 0,
        }
        return MonthlyReport(month=f"{year:04d}-{mon:02d}", rows=rows, summary=summary)

    def save_monthly_report(self, month: str) -> MonthlyReport:
        report = self.monthly_report(month)
        key = f"{MONTHLY_REPORT_KEY_PREFIX}{report.month}"
        self._settings.upsert_many({key: json.dumps(report.to_dict(), ensure_ascii=False)})
        logger.info("saved monthly report %s (%d players)", report.month, len(report.rows))
        return report

    def saved_monthly_report(self, month: str) -> Optional[Dict[str, Any]]:
        year, mon = parse_month(month)
        raw = self._settings.get(f"{MONTHLY_REPORT_KEY_PREFIX}{year:04d}-{mon:02d}")
        return json.loads(raw) if raw else None

    def save_daily_snapshot(self, on: date) -> DailySnapshot:
        key = f"{SAVED_ATTENDANCE_KEY_PREFIX}{on.isoformat()}"
        if self._settings.get(key) is not None:
            raise ValidationError(f"Attendance for {on.isoformat()} has already been saved")

        counts = AttendanceCounts.from_statuses(r.status for r in self._attendance.list_for_date(on))
        total_players = len(self._active_players())
        rate = round_half_up(counts.present / total_players * 100) if total_players else 0

        snapshot = DailySnapshot(
            date=on.isoformat(),
            total_players=total_players,
            present_count=counts.present,
            absent_count=counts.absent,
            excused_count=counts.excused,
            attendance_rate=rate,
            saved_at=utc_now_iso(),
        )
        self._settings.upsert_many({key: json.dumps(asdict(snapshot))})
        return snapshot

    def saved_daily_snapshots(self) -> List[DailySnapshot]:
        out: List[DailySnapshot] = []
        for key, raw in self._settings.get_all().items():
            if not key.startswith(SAVED_ATTENDANCE_KEY_PREFIX):
                continue
            try:
                out.append(DailySnapshot(**json.loads(raw)))
            except (TypeError, ValueError) as e:
                logger.warning("skipping unreadable snapshot %s: %s", key, e)
        out.sort(key=lambda s: s.date, reverse=True)
        return out

    def dashboard(self) -> DashboardStats:
        today = self._clock().date()
        players = self._directory.by_type(UserType.PLAYER)
        active = [p for p in players if p.status == UserStatus.ACTIVE]
        trainers = self._directory.by_type(UserType.TRAINER)
        expired = sum(1 for p in players if p.is_subscription_expired(today))

        present_today = 0
        try:
            present_today = sum(
                1 for r in self._attendance.list_for_date(today) if r.status == AttendanceStatus.PRESENT
            )
        except DataAccessError as e:
            logger.error("dashboard: attendance query failed: %s", e)
        rate = round_half_up(present_today / len(active) * 100) if active else 0

        pending = 0
        try:
            pending = len(self._excuses.list_all(status=ExcuseStatus.PENDING))
        except DataAccessError as e:
            logger.error("dashboard: pending excuse query failed: %s", e)

        return DashboardStats(
            total_players=len(players),
            active_players=len(active),
            total_trainers=len(trainers),
            expired_subscriptions=expired,
            present_today=present_today,
            attendance_rate=rate,
            pending_excuses=pending,
        )

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .attendance.service import AttendanceService
from .attendance.table_attendance_repository import TableAttendanceRepository
from .core.constants import DEFAULT_SETTINGS_CACHE_SECONDS, DEFAULT_USER_POLL_SECONDS
from .database.client import TableClient
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_client import InMemoryTableClient
from .database.mysql_table_client import MySQLTableClient
from .database.supabase_client import SupabaseTableClient
from .excuses.service import ExcuseService
from .excuses.table_excuse_repository import TableExcuseRepository
from .notifications.repository import TableNotificationRepository
from .notifications.service import NotificationService
from .reports.service import ReportService
from .settings.repository import TableSettingsRepository
from .settings.service import SettingsService
from .users.directory import UserDirectory
from .users.service import AuthService, UserService
from .users.table_user_repository import TableUserRepository

logger = logging.getLogger(__name__)

BACKENDS = ("supabase", "mysql", "memory")


@dataclass(frozen=True)
class Container:
    client: TableClient

    users_repo: TableUserRepository
    attendance_repo: TableAttendanceRepository
    excuses_repo: TableExcuseRepository
    settings_repo: TableSettingsRepository
    notifications_repo: TableNotificationRepository
    user_directory: UserDirectory

    notification_service: NotificationService
    settings_service: SettingsService
    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    excuse_service: ExcuseService
    report_service: ReportService


def make_table_client(
    backend: str,
    *,
    db_config: Optional[dict] = None,
    supabase_url: Optional[str] = None,
    supabase_key: Optional[str] = None,
) -> TableClient:
    backend = (backend or "").strip().lower()
    if backend == "supabase":
        return SupabaseTableClient.connect(supabase_url or "", supabase_key or "")
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config or {}))
        return MySQLTableClient(conn)
    if backend == "memory":
        return InMemoryTableClient()
    raise ValueError(f"Unknown DATA_BACKEND {backend!r} (expected one of: {', '.join(BACKENDS)})")


def build_container(
    *,
    client: TableClient,
    user_poll_seconds: float = DEFAULT_USER_POLL_SECONDS,
    settings_cache_seconds: float = DEFAULT_SETTINGS_CACHE_SECONDS,
    backup_admin_code: Optional[str] = None,
) -> Container:
    users_repo = TableUserRepository(client)
    attendance_repo = TableAttendanceRepository(client)
    excuses_repo = TableExcuseRepository(client)
    settings_repo = TableSettingsRepository(client)
    notifications_repo = TableNotificationRepository(client)
    user_directory = UserDirectory(users_repo, poll_seconds=user_poll_seconds)

    notification_service = NotificationService(notifications_repo)
    settings_service = SettingsService(
        settings_repo,
        users_repo,
        notification_service,
        cache_seconds=settings_cache_seconds,
    )
    auth_service = AuthService(users_repo, settings_service, backup_admin_code=backup_admin_code)
    user_service = UserService(users_repo, user_directory)
    attendance_service = AttendanceService(attendance_repo, users_repo, notification_service, settings_service)
    excuse_service = ExcuseService(excuses_repo, attendance_repo, users_repo, notification_service)
    report_service = ReportService(attendance_repo, excuses_repo, settings_repo, user_directory)

    return Container(
        client=client,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        excuses_repo=excuses_repo,
        settings_repo=settings_repo,
        notifications_repo=notifications_repo,
        user_directory=user_directory,
        notification_service=notification_service,
        settings_service=settings_service,
        auth_service=auth_service,
        user_service=user_service,
        attendance_service=attendance_service,
        excuse_service=excuse_service,
        report_service=report_service,
    )

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional

from ..common.validators import require_non_empty
from ..core.constants import (
    ADMIN_CODE_KEY,
    ADMIN_CODE_PREFIX,
    DEFAULT_ADMIN_CODE,
    DEFAULT_MAINTENANCE_MESSAGE,
    DEFAULT_SETTINGS,
    DEFAULT_SETTINGS_CACHE_SECONDS,
    MAINTENANCE_MESSAGE_KEY,
    MAINTENANCE_MODE_KEY,
)
from ..core.enums import NotificationType, UserType
from ..core.exceptions import ValidationError
from ..notifications.model import NewNotification
from ..notifications.service import NotificationService
from ..users.codes import generate_admin_code
from ..users.repository import UserRepository
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

MAINTENANCE_START_TITLE = "Maintenance notice"
MAINTENANCE_END_TITLE = "Maintenance finished"
MAINTENANCE_END_MESSAGE = "Maintenance is over. The academy is open again as usual."


@dataclass(frozen=True)
class MaintenanceChange:
    enabled: bool
    message: str
    notifications_sent: int


class SettingsService:
    """Key/value academy settings with a short-lived in-process cache."""

    def __init__(
        self,
        settings: SettingsRepository,
        users: UserRepository,
        notifications: NotificationService,
        *,
        cache_seconds: float = DEFAULT_SETTINGS_CACHE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
    ):
        self._settings = settings
        self._users = users
        self._notifications = notifications
        self._cache_seconds = float(cache_seconds)
        self._clock = clock
        self._rng = rng
        self._cache: Optional[Dict[str, str]] = None
        self._loaded_at = 0.0
        self._lock = threading.Lock()

    def get_all(self, *, refresh: bool = False) -> Dict[str, str]:
        with self._lock:
            fresh = self._cache is not None and self._clock() - self._loaded_at < self._cache_seconds
            if refresh or not fresh:
                self._cache = {**DEFAULT_SETTINGS, **self._settings.get_all()}
                self._loaded_at = self._clock()
            return dict(self._cache)

    def get(self, key: str, default: str = "") -> str:
        # Empty stored values fall back like missing ones.
        return self.get_all().get(key) or default

    def update(self, key: str, value: str) -> None:
        self.update_many({require_non_empty(key, "Setting key"): value})

    def update_many(self, values: Mapping[str, str]) -> None:
        self._settings.upsert_many({k: str(v) for k, v in values.items()})
        with self._lock:
            self._cache = None

    def invalidate(self) -> None:
        with self._lock:
            self._cache = None

    # Maintenance mode
    def is_maintenance_mode(self) -> bool:
        return self.get(MAINTENANCE_MODE_KEY) == "true"

    def maintenance_message(self) -> str:
        return self.get(MAINTENANCE_MESSAGE_KEY, DEFAULT_MAINTENANCE_MESSAGE)

    def set_maintenance(self, *, enabled: bool, message: Optional[str] = None) -> MaintenanceChange:
        message = (message or "").strip() or self.maintenance_message()
        self.update_many(
            {
                MAINTENANCE_MODE_KEY: "true" if enabled else "false",
                MAINTENANCE_MESSAGE_KEY: message,
            }
        )
        sent = self._notifications.notify_many(self._maintenance_notices(enabled=enabled, message=message))
        logger.info("maintenance mode %s (%d notification(s))", "on" if enabled else "off", sent)
        return MaintenanceChange(enabled=enabled, message=message, notifications_sent=sent)

    def _maintenance_notices(self, *, enabled: bool, message: str) -> List[NewNotification]:
        if enabled:
            title, text = MAINTENANCE_START_TITLE, message
            user_type, parent_type = NotificationType.MAINTENANCE_ALERT, NotificationType.MAINTENANCE_ALERT_PARENT
        else:
            title, text = MAINTENANCE_END_TITLE, MAINTENANCE_END_MESSAGE
            user_type, parent_type = NotificationType.MAINTENANCE_END, NotificationType.MAINTENANCE_END_PARENT

        notices: List[NewNotification] = []
        for user in self._users.list_all():
            if not user.is_active or user.user_type == UserType.ADMIN:
                continue
            notices.append(
                NewNotification(type=user_type, title=title, message=text, user_id=user.id, phone_number=user.phone)
            )
            if user.user_type == UserType.PLAYER and user.parent_phone:
                notices.append(
                    NewNotification(
                        type=parent_type,
                        title=f"{title} ({user.full_name})",
                        message=text,
                        user_id=user.id,
                        phone_number=user.parent_phone,
                    )
                )
        return notices

    # Admin code
    def admin_code(self) -> str:
        return self.get(ADMIN_CODE_KEY, DEFAULT_ADMIN_CODE)

    def update_admin_code(self, new_code: str) -> str:
        new_code = require_non_empty(new_code, "Admin code")
        if not new_code.startswith(ADMIN_CODE_PREFIX):
            raise ValidationError(f"Admin code must start with {ADMIN_CODE_PREFIX}")
        self.update(ADMIN_CODE_KEY, new_code)
        return new_code

    def generate_admin_code(self) -> str:
        return self.update_admin_code(generate_admin_code(rng=self._rng))

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.validators import optional_int, require_enum, require_non_empty
from ..core.constants import MAX_CODE_ATTEMPTS, RENEWAL_OPTIONS
from ..core.enums import UserStatus, UserType
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..settings.service import SettingsService
from .codes import code_for_status, generate_code, is_deactivated
from .directory import UserDirectory
from .model import PROFILE_FIELDS, AcademyUser
from .repository import UserRepository

logger = logging.getLogger(__name__)

ADMIN_DISPLAY_NAME = "Academy Administrator"


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: Optional[str]
    code: str
    full_name: str
    user_type: UserType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "code": self.code,
            "full_name": self.full_name,
            "user_type": self.user_type.value,
        }


class AuthService:
    """Use case: log in with an academy code."""

    def __init__(
        self,
        users: UserRepository,
        settings: SettingsService,
        *,
        backup_admin_code: Optional[str] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._settings = settings
        self._backup_admin_code = (backup_admin_code or "").strip() or None
        self._clock = clock

    def _is_admin_code(self, code: str) -> bool:
        if code == self._settings.admin_code():
            return True
        return self._backup_admin_code is not None and code == self._backup_admin_code

    def login(self, code: str) -> SessionUser:
        code = require_non_empty(code, "Code")

        if self._is_admin_code(code):
            return SessionUser(user_id=None, code=code, full_name=ADMIN_DISPLAY_NAME, user_type=UserType.ADMIN)

        user = self._users.get_by_code(code)
        if not user:
            raise AuthenticationError("Invalid code")

        if user.status == UserStatus.SUSPENDED:
            raise AuthenticationError("This account is suspended. Please contact the administration.")
        if user.status == UserStatus.INACTIVE:
            raise AuthenticationError("This account is inactive. Please contact the administration.")

        if user.user_type == UserType.PLAYER and user.is_subscription_expired(self._clock().date()):
            raise AuthenticationError("Your subscription has expired. Please renew it to continue.")

        if user.user_type != UserType.ADMIN and self._settings.is_maintenance_mode():
            raise AuthorizationError(self._settings.maintenance_message())

        return SessionUser(user_id=user.id, code=user.code, full_name=user.full_name, user_type=user.user_type)


def _clean_profile(values: Mapping[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key in PROFILE_FIELDS:
        if key not in values:
            continue
        value = values[key]
        if isinstance(value, str):
            value = value.strip() or None
        if key in ("age", "subscription_days"):
            value = optional_int(value, key)
        elif key == "salary" and value is not None:
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise ValidationError("salary must be a number")
        elif key == "subscription_start_date" and value is not None and not isinstance(value, date):
            value = parse_iso_date(str(value))
        out[key] = value
    return out


class UserService:
    """Use case: manage academy users (admin)."""

    def __init__(
        self,
        users: UserRepository,
        directory: UserDirectory,
        *,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._directory = directory
        self._rng = rng or random.Random()
        self._clock = clock

    def list_users(self, *, user_type: Optional[UserType] = None, status: Optional[UserStatus] = None) -> List[AcademyUser]:
        if user_type is not None:
            return self._directory.by_type(user_type, status=status)
        return [u for u in self._directory.all() if status is None or u.status == status]

    def get_user(self, user_id: str) -> AcademyUser:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def _unique_code(self, user_type: UserType) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = generate_code(user_type, rng=self._rng)
            if not self._users.get_by_code(code):
                return code
        raise ValidationError("Could not generate a free code, please try again")

    def add_user(
        self,
        *,
        user_type: UserType,
        full_name: str,
        phone: str,
        code: Optional[str] = None,
        **profile: Any,
    ) -> AcademyUser:
        if user_type == UserType.ADMIN:
            raise ValidationError("Admin accounts cannot be created here")

        values = _clean_profile(profile)
        values["full_name"] = require_non_empty(full_name, "Full name")
        values["phone"] = require_non_empty(phone, "Phone")

        if code and code.strip():
            code = code.strip()
            if self._users.get_by_code(code):
                raise ValidationError("This code is already in use")
        else:
            code = self._unique_code(user_type)

        if user_type == UserType.PLAYER and values.get("subscription_days") and not values.get("subscription_start_date"):
            values["subscription_start_date"] = self._clock().date()

        values.update(code=code, user_type=user_type, status=UserStatus.ACTIVE)
        user = self._users.create(values)
        self._directory.invalidate()
        logger.info("created %s %s (%s)", user.user_type.value, user.id, user.code)
        return user

    def update_user(self, user_id: str, changes: Mapping[str, Any]) -> AcademyUser:
        """Apply profile/status/code changes.

        Moving to suspended/inactive suffixes the code so it no longer logs in;
        moving back to active restores the original code.
        """
        user = self.get_user(user_id)
        values = _clean_profile(changes)
        for key in ("full_name", "phone"):
            if key in values:
                values[key] = require_non_empty(values[key], key.replace("_", " ").capitalize())

        code = user.code
        if "code" in changes:
            code = require_non_empty(changes["code"], "Code")
            if code != user.code:
                values["code"] = code

        if changes.get("status") is not None:
            status = require_enum(UserStatus, changes["status"], "status")
            values["status"] = status
            # Already-suspended codes keep their original suffix.
            if status == UserStatus.ACTIVE or status != user.status or not is_deactivated(code):
                new_code = code_for_status(code, status, at=self._clock())
                if new_code != user.code:
                    values["code"] = new_code

        new_code = values.get("code")
        if new_code and new_code != user.code:
            other = self._users.get_by_code(new_code)
            if other and other.id != user.id:
                raise ValidationError(f"Code {new_code} is already in use")

        if not values:
            return user

        updated = self._users.update(user_id, values)
        if not updated:
            raise NotFoundError("User not found")
        self._directory.invalidate()
        return updated

    def delete_user(self, user_id: str) -> None:
        user = self.get_user(user_id)
        if user.user_type == UserType.ADMIN:
            raise ValidationError("Admin accounts cannot be deleted")
        if not self._users.delete(user_id):
            raise NotFoundError("User not found")
        self._directory.invalidate()
        logger.info("deleted %s %s", user.user_type.value, user_id)

    def renew_subscription(self, user_id: str, *, days: int, start_date: Optional[date] = None) -> AcademyUser:
        if days not in RENEWAL_OPTIONS:
            options = ", ".join(str(d) for d in RENEWAL_OPTIONS)
            raise ValidationError(f"Unsupported renewal period (choose one of: {options} days)")

        user = self.get_user(user_id)
        if user.user_type != UserType.PLAYER:
            raise ValidationError("Only players have subscriptions")

        return self.update_user(
            user_id,
            {
                "subscription_days": days,
                "subscription_start_date": start_date or self._clock().date(),
                "status": UserStatus.ACTIVE.value,
            },
        )

    def expired_players(self) -> List[AcademyUser]:
        today = self._clock().date()
        return [u for u in self._directory.by_type(UserType.PLAYER) if u.is_subscription_expired(today)]

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from ..core.enums import LEARNER_TYPES, UserStatus, UserType

# Columns an admin may set besides code/status/user_type.
PROFILE_FIELDS = (
    "full_name",
    "phone",
    "age",
    "email",
    "residential_area",
    "address",
    "sport_type",
    "learning_goals",
    "parent_phone",
    "guardian_phone",
    "subscription_duration",
    "subscription_start_date",
    "subscription_days",
    "salary",
    "job_position",
)


@dataclass(frozen=True)
class AcademyUser:
    """A row of academy_users.

    Note: `code` is the login credential and is rewritten on suspension, so
    other rows always reference users by `id`.
    """

    id: str
    code: str
    full_name: str
    phone: str
    user_type: UserType
    status: UserStatus = UserStatus.ACTIVE
    age: Optional[int] = None
    email: Optional[str] = None
    residential_area: Optional[str] = None
    address: Optional[str] = None
    sport_type: Optional[str] = None
    learning_goals: Optional[str] = None
    parent_phone: Optional[str] = None
    guardian_phone: Optional[str] = None
    subscription_duration: Optional[str] = None
    subscription_start_date: Optional[date] = None
    subscription_days: Optional[int] = None
    salary: Optional[float] = None
    job_position: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_learner(self) -> bool:
        return self.user_type in LEARNER_TYPES

    @property
    def subscription_end_date(self) -> Optional[date]:
        if not self.subscription_start_date or not self.subscription_days:
            return None
        return self.subscription_start_date + timedelta(days=int(self.subscription_days))

    def is_subscription_expired(self, today: date) -> bool:
        end = self.subscription_end_date
        return end is not None and end <= today

    def contact_phone(self) -> Optional[str]:
        """Phone used for absence/excuse notices: guardian first, then the user's own."""
        return self.guardian_phone or self.phone or None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["user_type"] = self.user_type.value
        data["status"] = self.status.value
        for key in ("subscription_start_date", "created_at", "updated_at"):
            value = data.get(key)
            data[key] = value.isoformat() if value else None
        data["subscription_end_date"] = (
            self.subscription_end_date.isoformat() if self.subscription_end_date else None
        )
        return data

from __future__ import annotations

from enum import Enum


class UserType(str, Enum):
    """Account kinds stored in academy_users.user_type."""

    PLAYER = "player"
    STUDENT = "student"
    TRAINER = "trainer"
    ADMIN = "admin"
    EMPLOYEE = "employee"


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class AttendanceStatus(str, Enum):
    """Attendance states persisted per (player, date)."""

    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"


class ExcuseStatus(str, Enum):
    """Review states of an excuse submission."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class NotificationType(str, Enum):
    GENERAL = "general"
    ABSENCE_ALERT = "absence_alert"
    EXCUSE_REQUEST = "excuse_request"
    EXCUSE_APPROVED = "excuse_approved"
    EXCUSE_REJECTED = "excuse_rejected"
    MAINTENANCE_ALERT = "maintenance_alert"
    MAINTENANCE_ALERT_PARENT = "maintenance_alert_parent"
    MAINTENANCE_END = "maintenance_end"
    MAINTENANCE_END_PARENT = "maintenance_end_parent"


# Players and students are both "learners": they own attendance rows and excuses.
LEARNER_TYPES = frozenset({UserType.PLAYER, UserType.STUDENT})
STAFF_TYPES = frozenset({UserType.ADMIN, UserType.TRAINER, UserType.EMPLOYEE})

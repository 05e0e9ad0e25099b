"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import UserType

USERS_TABLE = "academy_users"
ATTENDANCE_TABLE = "attendance_records"
EXCUSES_TABLE = "excuse_submissions"
SETTINGS_TABLE = "academy_settings"
NOTIFICATIONS_TABLE = "academy_notifications"

CODE_PREFIXES = {
    UserType.PLAYER: "P-",
    UserType.TRAINER: "T-",
    UserType.STUDENT: "S-",
    UserType.EMPLOYEE: "E-",
}
DEACTIVATED_MARKER = "_DEACTIVATED_"

ADMIN_CODE_PREFIX = "V9-912"
DEFAULT_ADMIN_CODE = "V9-912000"

MAINTENANCE_MODE_KEY = "maintenance_mode"
MAINTENANCE_MESSAGE_KEY = "maintenance_message"
ADMIN_CODE_KEY = "admin_code"
ACADEMY_NAME_KEY = "academy_name"
SAVED_ATTENDANCE_KEY_PREFIX = "saved_attendance_"
MONTHLY_REPORT_KEY_PREFIX = "monthly_report_"

DEFAULT_ACADEMY_NAME = "Vision Pro Academy"
DEFAULT_MAINTENANCE_MESSAGE = "The academy is under maintenance. Please do not attend until further notice."

DEFAULT_SETTINGS = {
    MAINTENANCE_MODE_KEY: "false",
    MAINTENANCE_MESSAGE_KEY: DEFAULT_MAINTENANCE_MESSAGE,
    ADMIN_CODE_KEY: DEFAULT_ADMIN_CODE,
    ACADEMY_NAME_KEY: DEFAULT_ACADEMY_NAME,
}

MAX_SAVED_ACCOUNTS = 5
MAX_CODE_ATTEMPTS = 5
DEFAULT_USER_POLL_SECONDS = 1.0
DEFAULT_SETTINGS_CACHE_SECONDS = 60.0
DEFAULT_HISTORY_LIMIT = 60

# Subscription renewal options: days -> price
RENEWAL_OPTIONS = {
    15: 50,
    30: 100,
    60: 180,
    90: 250,
    180: 450,
    365: 800,
}

import os

SECRET_KEY = "test-secret"

DATA_BACKEND = "memory"

SUPABASE_URL = ""
SUPABASE_KEY = ""

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "academy_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

# No polling/caching delay so tests see their own writes.
USER_POLL_SECONDS = 0.0
SETTINGS_CACHE_SECONDS = 0.0

BACKUP_ADMIN_CODE = "V9-912999"

AUTO_INIT_DB = False
AUTO_SEED_DB = True

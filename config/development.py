import os

from config import env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# supabase | mysql | memory
DATA_BACKEND = os.getenv("DATA_BACKEND", "mysql")

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "academy_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

USER_POLL_SECONDS = float(os.getenv("USER_POLL_SECONDS", "1"))
SETTINGS_CACHE_SECONDS = float(os.getenv("SETTINGS_CACHE_SECONDS", "60"))

# Extra admin code that always works, for when the stored one is lost.
BACKUP_ADMIN_CODE = os.getenv("BACKUP_ADMIN_CODE", "")

# If enabled, app will apply schema.sql on startup (mysql backend; idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")
# Optional: also insert missing default settings on startup
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", "0")

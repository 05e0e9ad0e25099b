import os

from config import env_bool

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DATA_BACKEND = os.getenv("DATA_BACKEND", "supabase")

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_KEY = os.getenv("SUPABASE_KEY", "")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "academy_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

USER_POLL_SECONDS = float(os.getenv("USER_POLL_SECONDS", "1"))
SETTINGS_CACHE_SECONDS = float(os.getenv("SETTINGS_CACHE_SECONDS", "60"))

BACKUP_ADMIN_CODE = os.getenv("BACKUP_ADMIN_CODE", "")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_bool("AUTO_SEED_DB", "0")

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .accounts.controller import register as register_accounts
from .attendance.controller import register as register_attendance
from .container import Container, build_container, make_table_client
from .database.bootstrap import apply_schema, ensure_default_settings, list_tables
from .excuses.controller import register as register_excuses
from .notifications.controller import register as register_notifications
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    backend = str(getattr(settings, "DATA_BACKEND", "mysql"))
    db_config = dict(getattr(settings, "DB_CONFIG", {}))
    logger.info("settings=%s backend=%s", settings_module, backend)

    if container is None:
        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        client = make_table_client(
            backend,
            db_config=db_config,
            supabase_url=getattr(settings, "SUPABASE_URL", ""),
            supabase_key=getattr(settings, "SUPABASE_KEY", ""),
        )
        container = build_container(
            client=client,
            user_poll_seconds=float(getattr(settings, "USER_POLL_SECONDS", 1.0)),
            settings_cache_seconds=float(getattr(settings, "SETTINGS_CACHE_SECONDS", 60.0)),
            backup_admin_code=getattr(settings, "BACKUP_ADMIN_CODE", "") or None,
        )

    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_default_settings(container.client)

    app.extensions["academy_container"] = container

    register_accounts(app, container)
    register_users(app, container)
    register_attendance(app, container)
    register_excuses(app, container)
    register_reports(app, container)
    register_settings(app, container)
    register_notifications(app, container)

    return app

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.academy_system.academy_system.container import make_table_client
from src.academy_system.academy_system.database.bootstrap import apply_schema, ensure_default_settings, list_tables


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    backend = str(getattr(settings, "DATA_BACKEND", "mysql"))
    db_config = dict(settings.DB_CONFIG)

    try:
        if backend == "mysql":
            schema_path = REPO_ROOT / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            tables = list_tables(db_config)
            print(
                "OK: Applied schema.sql -> "
                f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
                f"(tables={len(tables)})"
            )

        client = make_table_client(
            backend,
            db_config=db_config,
            supabase_url=getattr(settings, "SUPABASE_URL", ""),
            supabase_key=getattr(settings, "SUPABASE_KEY", ""),
        )
        added = ensure_default_settings(client)
    except Exception as e:
        print(f"ERROR: database init failed: {e}", file=sys.stderr)
        return 1

    print(f"OK: Default settings ready on {backend} (added={len(added)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())

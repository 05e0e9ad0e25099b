from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.academy_system.academy_system.container import build_container, make_table_client
from src.academy_system.academy_system.core.enums import UserType
from src.academy_system.academy_system.database.bootstrap import ensure_default_settings

DEMO_USERS = [
    dict(user_type=UserType.TRAINER, full_name="Demo Trainer", phone="0500000001", code="T-100001", sport_type="football"),
    dict(
        user_type=UserType.PLAYER,
        full_name="Demo Player",
        phone="0500000002",
        code="P-100001",
        sport_type="football",
        age=12,
        guardian_phone="0500000003",
        parent_phone="0500000003",
        subscription_days=30,
    ),
    dict(user_type=UserType.STUDENT, full_name="Demo Student", phone="0500000004", code="S-100001"),
    dict(user_type=UserType.EMPLOYEE, full_name="Demo Employee", phone="0500000005", code="E-100001", job_position="Reception"),
]


def main() -> int:
    settings = importlib.import_module(get_settings_module())
    backend = str(getattr(settings, "DATA_BACKEND", "mysql"))

    try:
        client = make_table_client(
            backend,
            db_config=dict(settings.DB_CONFIG),
            supabase_url=getattr(settings, "SUPABASE_URL", ""),
            supabase_key=getattr(settings, "SUPABASE_KEY", ""),
        )
        container = build_container(client=client)
        ensure_default_settings(client)

        created = 0
        for demo in DEMO_USERS:
            if container.users_repo.get_by_code(demo["code"]):
                continue
            container.user_service.add_user(**demo)
            created += 1
    except Exception as e:
        print(f"ERROR: seeding failed: {e}", file=sys.stderr)
        return 1

    print(f"OK: Seeded {backend} backend (new users={created})")
    return 0


if __name__ == "__main__":
    sys.exit(main())

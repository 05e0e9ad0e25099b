from __future__ import annotations

from datetime import date

import pytest

from src.academy_system.academy_system.container import build_container
from src.academy_system.academy_system.core.enums import UserType
from src.academy_system.academy_system.database.memory_client import InMemoryTableClient

BACKUP_ADMIN_CODE = "V9-912999"


@pytest.fixture
def container():
    return build_container(
        client=InMemoryTableClient(),
        user_poll_seconds=0.0,
        settings_cache_seconds=0.0,
        backup_admin_code=BACKUP_ADMIN_CODE,
    )


@pytest.fixture
def player(container):
    return container.user_service.add_user(
        user_type=UserType.PLAYER,
        full_name="Omar Khaled",
        phone="0500000002",
        guardian_phone="0500000003",
        parent_phone="0500000004",
        sport_type="football",
        subscription_days=30,
        subscription_start_date=date(2026, 3, 1),
    )


@pytest.fixture
def trainer(container):
    return container.user_service.add_user(
        user_type=UserType.TRAINER,
        full_name="Sami Trainer",
        phone="0500000001",
        code="T-100001",
    )

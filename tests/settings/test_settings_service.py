import random

import pytest

from src.academy_system.academy_system.core.enums import NotificationType, UserType
from src.academy_system.academy_system.core.exceptions import ValidationError
from src.academy_system.academy_system.settings.service import SettingsService


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _cached_settings(container, clock):
    return SettingsService(
        container.settings_repo,
        container.users_repo,
        container.notification_service,
        cache_seconds=60,
        clock=clock,
    )


def test_defaults_apply_when_table_is_empty(container):
    assert container.settings_service.is_maintenance_mode() is False
    assert container.settings_service.admin_code() == "V9-912000"


def test_cache_serves_stale_values_until_expiry(container):
    clock = FakeClock()
    svc = _cached_settings(container, clock)
    assert svc.get("academy_name") == "Vision Pro Academy"

    container.settings_repo.upsert_many({"academy_name": "Renamed"})
    clock.now = 30.0
    assert svc.get("academy_name") == "Vision Pro Academy"

    clock.now = 61.0
    assert svc.get("academy_name") == "Renamed"


def test_own_updates_invalidate_cache(container):
    svc = _cached_settings(container, FakeClock())
    svc.get_all()
    svc.update("academy_name", "New Name")
    assert svc.get("academy_name") == "New Name"


def test_admin_code_must_keep_prefix(container):
    with pytest.raises(ValidationError):
        container.settings_service.update_admin_code("X-123")
    assert container.settings_service.update_admin_code("V9-912555") == "V9-912555"
    assert container.settings_service.admin_code() == "V9-912555"


def test_generated_admin_code_can_log_in(container):
    svc = SettingsService(
        container.settings_repo,
        container.users_repo,
        container.notification_service,
        cache_seconds=0,
        rng=random.Random(11),
    )
    code = svc.generate_admin_code()
    assert code.startswith("V9-912")
    assert container.auth_service.login(code).user_type == UserType.ADMIN


def test_maintenance_notifies_active_users_and_parents(container, player, trainer):
    suspended = container.user_service.add_user(user_type=UserType.STUDENT, full_name="Away", phone="0507")
    container.user_service.update_user(suspended.id, {"status": "suspended"})

    change = container.settings_service.set_maintenance(enabled=True, message="Closed Friday")

    assert change.enabled is True
    assert change.message == "Closed Friday"
    # player + player's parent + trainer
    assert change.notifications_sent == 3
    assert container.settings_service.is_maintenance_mode() is True
    types = sorted(n.type for n in container.notification_service.list_for_user(player.id))
    assert types == [NotificationType.MAINTENANCE_ALERT.value, NotificationType.MAINTENANCE_ALERT_PARENT.value]
    assert container.notification_service.list_for_user(suspended.id) == []


def test_ending_maintenance_sends_end_notices(container, trainer):
    container.settings_service.set_maintenance(enabled=True)
    change = container.settings_service.set_maintenance(enabled=False)

    assert change.enabled is False
    assert container.settings_service.is_maintenance_mode() is False
    types = [n.type for n in container.notification_service.list_for_user(trainer.id)]
    assert NotificationType.MAINTENANCE_END.value in types
